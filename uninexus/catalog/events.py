"""
Event reads and writes with cache-aside acceleration.

Reads: paginated list (``events:list:{hash}``) and detail
(``events:detail:{id}``). Writes go to the document store first; only after
they succeed are the event-dependent namespaces invalidated.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from uninexus.cache.filters import EventListFilters
from uninexus.cache.policy import DEFAULT_TTL_DETAIL, DEFAULT_TTL_LIST, EVENTS, OP_DETAIL
from uninexus.cache.service import CacheService, is_record
from uninexus.data.document_store import EVENTS_COLLECTION, DocumentStore, object_id
from uninexus.data.serialization import to_public
from uninexus.utils.logger import get_logger

logger = get_logger("catalog.events")


def pagination(total: int, limit: int, offset: int) -> Dict[str, Any]:
    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "hasMore": offset + limit < total,
    }


class EventCatalog:
    """Cached event list/detail reads plus invalidating mutations."""

    def __init__(
        self,
        cache: CacheService,
        store: DocumentStore,
        list_ttl: int = DEFAULT_TTL_LIST,
        detail_ttl: int = DEFAULT_TTL_DETAIL,
    ):
        self.cache = cache
        self.store = store
        self.list_ttl = list_ttl
        self.detail_ttl = detail_ttl

    async def list_events(self, filters: EventListFilters, now: Optional[datetime] = None) -> Dict[str, Any]:
        cached = await self.cache.get_events(filters)
        if cached is not None:
            return cached

        normalized = filters.normalized()
        query: Dict[str, Any] = {"isPublic": True}
        if normalized["category"] != "all":
            query["category"] = normalized["category"]
        if normalized["upcoming"] == "true":
            query["startTime"] = {"$gte": now or datetime.now(timezone.utc)}

        limit, offset = normalized["limit"], normalized["offset"]
        events = await self.store.find(
            EVENTS_COLLECTION, query, sort=[("startTime", 1)], skip=offset, limit=limit
        )
        total = await self.store.count(EVENTS_COLLECTION, query)

        data = {
            "events": [to_public(e) for e in events],
            "pagination": pagination(total, limit, offset),
        }
        await self.cache.set_events(filters, data, self.list_ttl)
        return data

    async def get_event(self, event_id: str) -> Optional[Dict[str, Any]]:
        """Event detail, or None when it does not exist (misses are not cached)."""
        key = self.cache.generate_key(EVENTS, OP_DETAIL, event_id)
        cached = await self.cache.get(key, is_record)
        if cached is not None:
            return cached

        event = await self.store.find_one(EVENTS_COLLECTION, {"_id": object_id(event_id)})
        if event is None:
            return None
        data = to_public(event)
        await self.cache.set(key, data, self.detail_ttl)
        return data

    async def create_event(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        document = {
            "isPublic": True,
            "category": "Other",
            "tags": [],
            **fields,
            "stats": {"attendeeCount": 0, "viewCount": 0},
            "createdAt": now,
            "updatedAt": now,
        }
        created = await self.store.insert_one(EVENTS_COLLECTION, document)
        await self.cache.invalidate_for_mutation(EVENTS)
        logger.info(f"Created event {created['_id']}")
        return to_public(created)

    async def update_event(self, event_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        updated = await self.store.update_one(
            EVENTS_COLLECTION,
            {"_id": object_id(event_id)},
            set_fields={**changes, "updatedAt": datetime.now(timezone.utc)},
        )
        if updated is None:
            return None
        await self.cache.invalidate_for_mutation(EVENTS)
        return to_public(updated)

    async def delete_event(self, event_id: str) -> bool:
        deleted = await self.store.delete_one(EVENTS_COLLECTION, {"_id": object_id(event_id)})
        if deleted:
            await self.cache.invalidate_for_mutation(EVENTS)
            logger.info(f"Deleted event {event_id}")
        return deleted

    async def record_rsvp(self, event_id: str, delta: int = 1) -> Optional[Dict[str, Any]]:
        """Adjust the attendee counter after an RSVP change."""
        updated = await self.store.update_one(
            EVENTS_COLLECTION,
            {"_id": object_id(event_id)},
            increments={"stats.attendeeCount": delta},
        )
        if updated is None:
            return None
        await self.cache.invalidate_for_mutation(EVENTS)
        return to_public(updated)
