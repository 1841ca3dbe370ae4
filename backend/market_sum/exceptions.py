# backend/market_sum/exceptions.py
"""
Exceptions for the market summary service.
Upstream failures are caught per source/symbol and turned into fallback data;
auth and configuration errors surface to the API layer.
"""
from __future__ import annotations


class MarketSumError(Exception):
    """Base exception for the application."""
    pass


class UpstreamError(MarketSumError):
    """Raised when an upstream request fails (timeout, DNS, non-2xx)."""
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class MalformedPayloadError(UpstreamError):
    """Raised when an upstream answered but the payload lacks expected fields."""
    pass


class ConfigurationError(MarketSumError):
    """Raised when a feature is used without the settings it needs."""
    pass


class AuthenticationError(MarketSumError):
    """Raised when a token or OAuth exchange cannot be validated."""
    pass


class UserNotFoundError(MarketSumError):
    """Raised when a user id does not exist in the store."""
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User with ID {user_id} not found")
