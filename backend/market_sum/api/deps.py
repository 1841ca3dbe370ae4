# backend/market_sum/api/deps.py
"""Dependencies shared by the routers: services from app state, auth, throttling"""

from typing import Dict, List
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from market_sum.core.config import settings
from market_sum.db.repositories import UserRepository
from market_sum.exceptions import AuthenticationError, ConfigurationError
from market_sum.logger import get_logger
from market_sum.schemas.user import User
from market_sum.services.auth import AuthService
from market_sum.services.google_oauth import GoogleOAuthClient
from market_sum.services.news_aggregator import NewsAggregator
from market_sum.services.quotes import QuoteService

log = get_logger(__name__)

# Bearer token; the OAuth dance itself happens on /auth/google
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/refresh")


def get_news_aggregator(request: Request) -> NewsAggregator:
    return request.app.state.news_aggregator


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quote_service


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.user_repository


def get_auth_service(users: UserRepository = Depends(get_user_repository)) -> AuthService:
    return AuthService(users, expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def get_google_client(request: Request) -> GoogleOAuthClient:
    client = getattr(request.app.state, "google_client", None)
    if client is None:
        raise ConfigurationError("Google OAuth is not configured")
    return client


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """Resolve the bearer token to a stored user"""
    try:
        return await auth.validate_token(token)
    except AuthenticationError as e:
        log.warning("Rejected bearer token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


class RateLimiter:
    """Simple in-memory sliding-window limiter keyed by client address"""
    def __init__(self, times: int = 100, seconds: int = 60):
        self.times = times
        self.seconds = seconds
        self.calls: Dict[str, List[datetime]] = {}

    def __call__(self, request: Request) -> None:
        key = request.client.host if request.client else "anonymous"
        now = datetime.now(timezone.utc)
        window_start = now - timedelta(seconds=self.seconds)

        # Clean old entries
        self.calls = {
            k: times
            for k, times in self.calls.items()
            if any(t > window_start for t in times)
        }

        recent = [t for t in self.calls.get(key, []) if t > window_start]
        if len(recent) >= self.times:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Rate limit exceeded. Maximum {self.times} requests per {self.seconds} seconds.",
            )
        self.calls[key] = recent + [now]


rate_limit_api = RateLimiter(times=settings.THROTTLE_LIMIT, seconds=settings.THROTTLE_TTL)
