# backend/market_sum/schemas/user.py
"""User related schemas"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    """Identity handed over by an OAuth provider"""
    email: EmailStr
    first_name: str = ""
    last_name: str = ""
    picture: Optional[str] = None
    provider: str = "google"
    provider_id: Optional[str] = None


class User(UserCreate):
    """Stored user"""
    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserProfile(BaseModel):
    """Public profile returned by the API"""
    id: str
    email: EmailStr
    first_name: str
    last_name: str
    picture: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            picture=user.picture,
        )
