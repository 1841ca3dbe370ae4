# backend/market_sum/schemas/__init__.py
"""
Import all schemas for easy access throughout the application.
"""

from market_sum.schemas.news import Article, Sentiment, SourceSpec
from market_sum.schemas.market import AustralianMarket, MarketIndex, MarketSummary, Quote
from market_sum.schemas.user import User, UserCreate, UserProfile
from market_sum.schemas.auth import GoogleUser, RefreshTokenRequest, Token
from market_sum.schemas.api import ApiResponse

__all__ = [
    # News
    "Article",
    "Sentiment",
    "SourceSpec",

    # Market
    "Quote",
    "MarketIndex",
    "MarketSummary",
    "AustralianMarket",

    # Users / auth
    "User",
    "UserCreate",
    "UserProfile",
    "GoogleUser",
    "Token",
    "RefreshTokenRequest",

    # Envelope
    "ApiResponse",
]
