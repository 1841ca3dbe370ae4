# backend/market_sum/schemas/auth.py
"""Authentication related schemas"""

from pydantic import BaseModel, Field
from typing import Optional

from market_sum.schemas.user import UserProfile


class GoogleUser(BaseModel):
    """Subset of the Google userinfo response we rely on"""
    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    picture: Optional[str] = None


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserProfile


class RefreshTokenRequest(BaseModel):
    """Refresh request: trade a still-valid token for a fresh one"""
    token: str = Field(..., min_length=1)
