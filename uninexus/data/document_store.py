"""
Document store access for events, clubs and users.

``MongoDocumentStore`` talks to MongoDB through Motor. ``InMemoryDocumentStore``
evaluates the same filter documents in process and is used when no
MONGO_URL is configured (local development) and in tests.

The store is the source of truth; its failures propagate to the caller.
"""
import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ReturnDocument

from uninexus.data.matching import matches, sort_documents
from uninexus.utils.logger import get_logger

logger = get_logger("data.document_store")

EVENTS_COLLECTION = "events"
CLUBS_COLLECTION = "clubprofiles"
USERS_COLLECTION = "users"

Sort = Optional[Sequence[Tuple[str, int]]]


def object_id(entity_id: Any) -> Any:
    """Coerce a 24-hex string to ObjectId; leave anything else untouched."""
    if isinstance(entity_id, str) and ObjectId.is_valid(entity_id):
        return ObjectId(entity_id)
    return entity_id


class DocumentStore:
    """Interface shared by the Mongo and in-memory stores."""

    async def find(self, collection: str, query: Mapping[str, Any], sort: Sort = None,
                   skip: int = 0, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def find_one(self, collection: str, query: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def count(self, collection: str, query: Mapping[str, Any]) -> int:
        raise NotImplementedError

    async def insert_one(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def update_one(self, collection: str, query: Mapping[str, Any],
                         set_fields: Optional[Dict[str, Any]] = None,
                         increments: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
        """Apply ``$set``/``$inc``; returns the updated document or None if nothing matched."""
        raise NotImplementedError

    async def delete_one(self, collection: str, query: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    async def ping(self) -> bool:
        raise NotImplementedError

    async def close(self) -> None:
        return None


class MongoDocumentStore(DocumentStore):
    """Motor-backed store."""

    def __init__(self, mongo_url: str, db_name: str = "uninexus", timeout_ms: int = 5000):
        self.client = AsyncIOMotorClient(
            mongo_url,
            maxPoolSize=50,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            tz_aware=True,
        )
        self.db = self.client[db_name]
        logger.info(f"Using MongoDB database '{db_name}'")

    async def find(self, collection, query, sort=None, skip=0, limit=None):
        cursor = self.db[collection].find(dict(query))
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(length=None)

    async def find_one(self, collection, query):
        return await self.db[collection].find_one(dict(query))

    async def count(self, collection, query):
        return await self.db[collection].count_documents(dict(query))

    async def insert_one(self, collection, document):
        doc = dict(document)
        result = await self.db[collection].insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def update_one(self, collection, query, set_fields=None, increments=None):
        update: Dict[str, Any] = {}
        if set_fields:
            update["$set"] = set_fields
        if increments:
            update["$inc"] = increments
        if not update:
            return await self.find_one(collection, query)
        return await self.db[collection].find_one_and_update(
            dict(query), update, return_document=ReturnDocument.AFTER
        )

    async def delete_one(self, collection, query):
        result = await self.db[collection].delete_one(dict(query))
        return result.deleted_count > 0

    async def ping(self):
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    async def close(self):
        self.client.close()


def _set_path(doc: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    target = doc
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    target[parts[-1]] = value


def _get_number(doc: Dict[str, Any], path: str) -> float:
    target: Any = doc
    for part in path.split("."):
        if not isinstance(target, dict) or part not in target:
            return 0
        target = target[part]
    return target or 0


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local store with Mongo filter semantics for the operators the
    read path uses. Returned documents are copies.
    """

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.collections: Dict[str, List[Dict[str, Any]]] = {}
        for name, docs in (collections or {}).items():
            for doc in docs:
                self._insert(name, doc)

    def _insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        doc = copy.deepcopy(document)
        doc.setdefault("_id", ObjectId())
        now = datetime.now(timezone.utc)
        doc.setdefault("createdAt", now)
        doc.setdefault("updatedAt", now)
        self.collections.setdefault(collection, []).append(doc)
        return doc

    def _matching(self, collection: str, query: Mapping[str, Any]) -> List[Dict[str, Any]]:
        return [doc for doc in self.collections.get(collection, []) if matches(doc, query)]

    async def find(self, collection, query, sort=None, skip=0, limit=None):
        docs = sort_documents(self._matching(collection, query), sort)
        docs = docs[skip:]
        if limit:
            docs = docs[:limit]
        return [copy.deepcopy(doc) for doc in docs]

    async def find_one(self, collection, query):
        found = self._matching(collection, query)
        return copy.deepcopy(found[0]) if found else None

    async def count(self, collection, query):
        return len(self._matching(collection, query))

    async def insert_one(self, collection, document):
        return copy.deepcopy(self._insert(collection, document))

    async def update_one(self, collection, query, set_fields=None, increments=None):
        found = self._matching(collection, query)
        if not found:
            return None
        doc = found[0]
        for path, value in (set_fields or {}).items():
            _set_path(doc, path, copy.deepcopy(value))
        for path, amount in (increments or {}).items():
            _set_path(doc, path, _get_number(doc, path) + amount)
        return copy.deepcopy(doc)

    async def delete_one(self, collection, query):
        found = self._matching(collection, query)
        if not found:
            return False
        self.collections[collection].remove(found[0])
        return True

    async def ping(self):
        return True
