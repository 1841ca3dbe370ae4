# backend/market_sum/services/auth.py
from __future__ import annotations

from datetime import timedelta

from market_sum.core.security import create_access_token, decode_access_token
from market_sum.db.repositories import UserRepository
from market_sum.exceptions import AuthenticationError
from market_sum.logger import get_logger
from market_sum.schemas.auth import GoogleUser, Token
from market_sum.schemas.user import User, UserCreate, UserProfile

log = get_logger(__name__)


class AuthService:
    def __init__(self, users: UserRepository, expire_minutes: int):
        self.users = users
        self.expire_minutes = expire_minutes

    async def validate_google_user(self, google_user: GoogleUser) -> User:
        """Find the user by email or create them; refresh Google details on repeat logins."""
        user = await self.users.find_by_email(google_user.email)
        if user is None:
            user = await self.users.create(UserCreate(
                email=google_user.email,
                first_name=google_user.first_name,
                last_name=google_user.last_name,
                picture=google_user.picture,
                provider="google",
                provider_id=google_user.id,
            ))
            log.info("Created user %s for %s", user.id, user.email)
            return user

        return await self.users.update(user.id, picture=google_user.picture, provider_id=google_user.id)

    def generate_token(self, user: User) -> Token:
        payload = {
            "sub": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
        }
        token = create_access_token(payload, expires_delta=timedelta(minutes=self.expire_minutes))
        return Token(
            access_token=token,
            expires_in=self.expire_minutes * 60,
            user=UserProfile.from_user(user),
        )

    async def validate_token(self, token: str) -> User:
        payload = decode_access_token(token)
        if not payload or not payload.get("sub"):
            raise AuthenticationError("Invalid token")
        user = await self.users.find_by_id(payload["sub"])
        if user is None:
            raise AuthenticationError("User not found")
        return user
