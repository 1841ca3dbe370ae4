# backend/market_sum/db/__init__.py
"""User storage: in-memory by default, MongoDB when USER_STORE=mongo"""

from .mongo import (
    connect_to_mongo,
    close_mongo_connection,
)

from .repositories import (
    UserRepository,
    InMemoryUserRepository,
    MongoUserRepository,
)

__all__ = [
    "connect_to_mongo",
    "close_mongo_connection",
    "UserRepository",
    "InMemoryUserRepository",
    "MongoUserRepository",
]
