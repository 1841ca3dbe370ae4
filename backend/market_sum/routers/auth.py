# backend/market_sum/routers/auth.py
"""Authentication endpoints: Google OAuth login and bearer-token management"""

from typing import Optional
from urllib.parse import urlencode
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from market_sum.api.deps import get_auth_service, get_current_user, get_google_client
from market_sum.core.config import settings
from market_sum.core.security import create_state_token, verify_state_token
from market_sum.exceptions import AuthenticationError
from market_sum.logger import get_logger
from market_sum.schemas.auth import RefreshTokenRequest, Token
from market_sum.schemas.user import User, UserProfile
from market_sum.services.auth import AuthService
from market_sum.services.google_oauth import GoogleOAuthClient

log = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/google", summary="Initiate Google OAuth login")
async def google_login(google: GoogleOAuthClient = Depends(get_google_client)):
    return RedirectResponse(google.authorization_url(create_state_token()), status_code=status.HTTP_302_FOUND)


@router.get("/google/callback", summary="Google OAuth callback")
async def google_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    google: GoogleOAuthClient = Depends(get_google_client),
    auth: AuthService = Depends(get_auth_service),
):
    if error or not code:
        log.warning("Google OAuth callback without code: %s", error)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication failed")
    if not verify_state_token(state):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OAuth state")

    try:
        google_user = await google.exchange_code(code)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    user = await auth.validate_google_user(google_user)
    token = auth.generate_token(user)
    log.info("User %s logged in via Google", user.id)

    # Frontend picks the token up from the query string
    redirect_url = f"{settings.FRONTEND_URL}/auth/callback?{urlencode({'token': token.access_token})}"
    return RedirectResponse(redirect_url, status_code=status.HTTP_302_FOUND)


@router.post("/refresh", response_model=Token, summary="Refresh JWT token")
async def refresh_token(body: RefreshTokenRequest, auth: AuthService = Depends(get_auth_service)):
    try:
        user = await auth.validate_token(body.token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.generate_token(user)


@router.get("/profile", response_model=UserProfile, summary="Get current user profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    return UserProfile.from_user(current_user)


@router.get("/logout", summary="Logout user")
async def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the frontend drops its copy
    log.info("User %s logged out", current_user.id)
    return RedirectResponse(f"{settings.FRONTEND_URL}/auth/logout", status_code=status.HTTP_302_FOUND)
