"""
Discover: filtered free-text search over events and clubs.

Results for each normalized filter combination are cached under
``discover:search:{hash}`` with the short search TTL.
"""
import re
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional

from uninexus.cache.filters import DiscoverFilters
from uninexus.cache.policy import DEFAULT_TTL_SEARCH, DISCOVER, OP_SEARCH
from uninexus.cache.service import CacheService, has_lists
from uninexus.data.document_store import CLUBS_COLLECTION, EVENTS_COLLECTION, DocumentStore
from uninexus.data.serialization import to_public
from uninexus.discovery.date_ranges import start_time_condition
from uninexus.utils.logger import get_logger

logger = get_logger("discovery.discover")

DEFAULT_DISCOVER_LIMIT = 50

EVENT_SORT = [("startTime", 1)]
CLUB_SORT = [("isVerified", -1), ("createdAt", -1)]


def _text_pattern(query: str) -> Dict[str, str]:
    # Literal, case-insensitive substring match
    return {"$regex": re.escape(query), "$options": "i"}


def build_event_query(filters: Dict[str, Any], now: datetime, tz: Optional[tzinfo] = None) -> Dict[str, Any]:
    """Mongo filter for public events matching normalized discover filters."""
    query: Dict[str, Any] = {"isPublic": True}
    text = filters["query"]
    if text:
        query["$or"] = [
            {"title": _text_pattern(text)},
            {"description": _text_pattern(text)},
            {"tags": {"$in": [re.compile(re.escape(text), re.IGNORECASE)]}},
        ]
    if filters["category"] != "all":
        query["category"] = filters["category"]
    query["startTime"] = start_time_condition(filters["dateRange"], now, tz)
    return query


def build_club_query(filters: Dict[str, Any]) -> Dict[str, Any]:
    """Mongo filter for clubs matching normalized discover filters."""
    query: Dict[str, Any] = {}
    text = filters["query"]
    if text:
        query["$or"] = [
            {"name": _text_pattern(text)},
            {"description": _text_pattern(text)},
        ]
    if filters["category"] != "all":
        query["category"] = filters["category"]
    return query


class DiscoverService:
    """Cache-aside discover search."""

    def __init__(
        self,
        cache: CacheService,
        store: DocumentStore,
        ttl: int = DEFAULT_TTL_SEARCH,
        limit: int = DEFAULT_DISCOVER_LIMIT,
        tz: Optional[tzinfo] = None,
    ):
        self.cache = cache
        self.store = store
        self.ttl = ttl
        self.limit = limit
        self.tz = tz

    def cache_key(self, filters: DiscoverFilters) -> str:
        return self.cache.generate_key(DISCOVER, OP_SEARCH, self.cache.hash_filters(filters))

    async def discover(self, filters: DiscoverFilters, now: Optional[datetime] = None) -> Dict[str, List[Dict[str, Any]]]:
        """
        Return ``{"events": [...], "clubs": [...]}`` for the given filters.

        Events are sorted by start time ascending; each list is capped at
        ``limit``. Data-store errors propagate.
        """
        key = self.cache_key(filters)
        cached = await self.cache.get(key, has_lists("events", "clubs"))
        if cached is not None:
            logger.debug("Returning cached discover data")
            return cached

        normalized = filters.normalized()
        now = now or datetime.now(timezone.utc)
        events: List[Dict[str, Any]] = []
        clubs: List[Dict[str, Any]] = []

        if normalized["type"] in ("events", "all"):
            events = await self.store.find(
                EVENTS_COLLECTION,
                build_event_query(normalized, now, self.tz),
                sort=EVENT_SORT,
                limit=self.limit,
            )

        if normalized["type"] in ("clubs", "all"):
            clubs = await self.store.find(
                CLUBS_COLLECTION,
                build_club_query(normalized),
                sort=CLUB_SORT,
                limit=self.limit,
            )

        data = {
            "events": [to_public(e) for e in events[:self.limit]],
            "clubs": [to_public(c) for c in clubs[:self.limit]],
        }
        logger.info(
            f"Discover {normalized}: {len(data['events'])} events, {len(data['clubs'])} clubs"
        )

        await self.cache.set(key, data, self.ttl)
        return data
