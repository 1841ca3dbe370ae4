# backend/market_sum/db/repositories.py
"""User store: one interface, an in-memory backend and a MongoDB backend"""

from __future__ import annotations
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from market_sum.exceptions import UserNotFoundError
from market_sum.schemas.user import User, UserCreate

# Fields callers may change through update()
UPDATABLE_FIELDS = {"first_name", "last_name", "picture", "provider", "provider_id"}


def _clean_update(fields: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")
    return {k: v for k, v in fields.items() if v is not None}


class UserRepository(ABC):
    """What the auth layer needs from a user store"""

    @abstractmethod
    async def create(self, data: UserCreate) -> User:
        ...

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def update(self, user_id: str, **fields: Any) -> User:
        """Apply `fields` and bump updated_at; raises UserNotFoundError"""

    @abstractmethod
    async def list_all(self) -> List[User]:
        ...


class InMemoryUserRepository(UserRepository):
    """Process-local store; contents vanish on restart"""

    def __init__(self):
        self._users: Dict[str, User] = {}

    async def create(self, data: UserCreate) -> User:
        user = User(id=uuid.uuid4().hex, **data.model_dump())
        self._users[user.id] = user
        return user

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    async def update(self, user_id: str, **fields: Any) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        changes = _clean_update(fields)
        changes["updated_at"] = datetime.now(timezone.utc)
        user = user.model_copy(update=changes)
        self._users[user_id] = user
        return user

    async def list_all(self) -> List[User]:
        return list(self._users.values())


class MongoUserRepository(UserRepository):
    """Users kept in the `users` collection"""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "users"):
        self.db = db
        self.collection: AsyncIOMotorCollection = db[collection_name]

    @staticmethod
    def _to_user(doc: Optional[dict]) -> Optional[User]:
        if not doc:
            return None
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return User(**doc)

    async def create(self, data: UserCreate) -> User:
        now = datetime.now(timezone.utc)
        document = {**data.model_dump(), "created_at": now, "updated_at": now}
        result = await self.collection.insert_one(document)
        return User(id=str(result.inserted_id), **data.model_dump(), created_at=now, updated_at=now)

    async def find_by_id(self, user_id: str) -> Optional[User]:
        if not ObjectId.is_valid(user_id):
            return None
        return self._to_user(await self.collection.find_one({"_id": ObjectId(user_id)}))

    async def find_by_email(self, email: str) -> Optional[User]:
        return self._to_user(await self.collection.find_one({"email": email}))

    async def update(self, user_id: str, **fields: Any) -> User:
        changes = _clean_update(fields)
        changes["updated_at"] = datetime.now(timezone.utc)
        if ObjectId.is_valid(user_id):
            await self.collection.update_one({"_id": ObjectId(user_id)}, {"$set": changes})
        user = await self.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def list_all(self) -> List[User]:
        cursor = self.collection.find({})
        return [self._to_user(doc) for doc in await cursor.to_list(length=None)]
