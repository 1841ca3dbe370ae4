# backend/market_sum/db/mongo.py
"""MongoDB connection management for the optional mongo user store"""

from __future__ import annotations
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from market_sum.core.config import settings
from market_sum.logger import get_logger

log = get_logger(__name__)

# Global client and database instances
_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo(uri: Optional[str] = None, db_name: Optional[str] = None) -> AsyncIOMotorDatabase:
    """Open the client, verify the server answers and make sure indexes exist"""
    global _client, _db

    uri = uri or settings.MONGO_URI
    db_name = db_name or settings.MONGO_DB_NAME

    _client = AsyncIOMotorClient(
        uri,
        maxPoolSize=10,
        minPoolSize=1,
        maxIdleTimeMS=60000,
    )
    _db = _client[db_name]

    await _client.server_info()
    log.info("Connected to MongoDB: %s", db_name)

    await ensure_indexes(_db)
    return _db


async def close_mongo_connection() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
        log.info("Disconnected from MongoDB")
    _client = None
    _db = None


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create required indexes (idempotent)"""
    try:
        await db["users"].create_index("email", unique=True)
    except Exception as e:
        log.warning("Some indexes may not have been created: %s", e)
