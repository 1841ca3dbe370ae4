# backend/market_sum/services/__init__.py
"""
Service modules for business logic
"""

from . import auth
from . import google_oauth
from . import news_aggregator
from . import quotes

__all__ = [
    "auth",
    "google_oauth",
    "news_aggregator",
    "quotes",
]
