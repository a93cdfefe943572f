"""Async CRUD for index-set documents. One document per index set, _id = str(index set id)."""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.repositories.mongodb.base import _translate_pymongo_error, get_collection
from app.services.index_sets.base import BaseIndexSetStore


class MongoIndexSetStore(BaseIndexSetStore):
    """BaseIndexSetStore backed by a MongoDB collection per collection key."""

    def __init__(self, db: AsyncIOMotorDatabase | None = None):
        self._db = db

    async def put(self, collection_key: str, doc_id: str, document: dict[str, Any]) -> None:
        """Insert or replace the document."""
        coll = get_collection(collection_key, self._db)
        try:
            await coll.replace_one({"_id": doc_id}, {**document, "_id": doc_id}, upsert=True)
        except PyMongoError as e:
            raise _translate_pymongo_error(e, "save index-set document") from e

    async def get(self, collection_key: str, doc_id: str) -> dict[str, Any] | None:
        coll = get_collection(collection_key, self._db)
        try:
            return await coll.find_one({"_id": doc_id})
        except PyMongoError as e:
            raise _translate_pymongo_error(e, "read index-set document") from e

    async def delete(self, collection_key: str, doc_id: str) -> None:
        coll = get_collection(collection_key, self._db)
        try:
            await coll.delete_one({"_id": doc_id})
        except PyMongoError as e:
            raise _translate_pymongo_error(e, "delete index-set document") from e

    async def exists(self, collection_key: str, doc_id: str) -> bool:
        coll = get_collection(collection_key, self._db)
        try:
            return await coll.count_documents({"_id": doc_id}, limit=1) > 0
        except PyMongoError as e:
            raise _translate_pymongo_error(e, "check index-set document") from e

    async def list_ids(self, collection_key: str) -> list[str]:
        """All stored ids, in index_set_id order."""
        coll = get_collection(collection_key, self._db)
        try:
            cursor = coll.find({}, {"_id": 1}).sort("index_set_id", 1)
            return [doc["_id"] async for doc in cursor]
        except PyMongoError as e:
            raise _translate_pymongo_error(e, "list index-set ids") from e
