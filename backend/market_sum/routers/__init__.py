# backend/market_sum/routers/__init__.py
"""
Router modules for API endpoints
"""

from . import auth
from . import market
from . import news

__all__ = [
    "auth",
    "market",
    "news",
]
