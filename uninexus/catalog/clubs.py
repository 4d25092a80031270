"""
Club reads and writes with cache-aside acceleration.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from uninexus.cache.filters import ClubListFilters
from uninexus.cache.policy import CLUBS, DEFAULT_TTL_DETAIL, DEFAULT_TTL_LIST, OP_DETAIL
from uninexus.cache.service import CacheService, is_record
from uninexus.catalog.events import pagination
from uninexus.data.document_store import CLUBS_COLLECTION, DocumentStore, object_id
from uninexus.data.serialization import to_public
from uninexus.utils.logger import get_logger

logger = get_logger("catalog.clubs")


class ClubCatalog:
    """Cached club list/detail reads plus invalidating mutations."""

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

    async def list_clubs(self, filters: ClubListFilters) -> Dict[str, Any]:
        cached = await self.cache.get_clubs(filters)
        if cached is not None:
            return cached

        normalized = filters.normalized()
        query: Dict[str, Any] = {}
        if normalized["verified"] == "true":
            query["isVerified"] = True
        if normalized["category"] != "all":
            query["category"] = normalized["category"]

        limit, offset = normalized["limit"], normalized["offset"]
        clubs = await self.store.find(
            CLUBS_COLLECTION, query, sort=[("createdAt", -1)], skip=offset, limit=limit
        )
        total = await self.store.count(CLUBS_COLLECTION, query)

        data = {
            "clubs": [to_public(c) for c in clubs],
            "pagination": pagination(total, limit, offset),
        }
        await self.cache.set_clubs(filters, data, self.list_ttl)
        return data

    async def get_club(self, club_id: str) -> Optional[Dict[str, Any]]:
        key = self.cache.generate_key(CLUBS, OP_DETAIL, club_id)
        cached = await self.cache.get(key, is_record)
        if cached is not None:
            return cached

        club = await self.store.find_one(CLUBS_COLLECTION, {"_id": object_id(club_id)})
        if club is None:
            return None
        data = to_public(club)
        await self.cache.set(key, data, self.detail_ttl)
        return data

    async def create_club(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        document = {
            "isVerified": False,
            "logoUrl": "",
            **fields,
            "stats": {"memberCount": 0, "eventCount": 0},
            "createdAt": now,
            "updatedAt": now,
        }
        created = await self.store.insert_one(CLUBS_COLLECTION, document)
        await self.cache.invalidate_for_mutation(CLUBS)
        logger.info(f"Created club {created['_id']}")
        return to_public(created)

    async def update_club(self, club_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        updated = await self.store.update_one(
            CLUBS_COLLECTION,
            {"_id": object_id(club_id)},
            set_fields={**changes, "updatedAt": datetime.now(timezone.utc)},
        )
        if updated is None:
            return None
        await self.cache.invalidate_for_mutation(CLUBS)
        return to_public(updated)
