# backend/market_sum/core/security.py
"""JWT helpers for access tokens and OAuth state"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt

from market_sum.core.config import settings

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": to_encode.get("type", "access")})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str, expected_type: str = "access") -> Optional[dict]:
    """Decode and verify a JWT token; None if invalid, expired or of another type"""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != expected_type:
        return None
    return payload


def create_state_token() -> str:
    """Short-lived signed value for the OAuth `state` round trip"""
    return create_access_token(
        {"type": "oauth_state"},
        expires_delta=timedelta(minutes=settings.OAUTH_STATE_EXPIRE_MINUTES),
    )


def verify_state_token(state: Optional[str]) -> bool:
    return bool(state) and decode_access_token(state, expected_type="oauth_state") is not None
