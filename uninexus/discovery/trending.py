"""
Trending: engagement-ranked events and clubs.

Pulls every public future event and every verified club, scores each one,
sorts descending and keeps the top N. There is exactly one trending view,
cached whole under ``trending:ranked:all``.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from uninexus.cache.policy import DEFAULT_TTL_TRENDING, OP_RANKED, TRENDING, TRENDING_IDENTIFIER
from uninexus.cache.service import CacheService, has_lists
from uninexus.data.document_store import CLUBS_COLLECTION, EVENTS_COLLECTION, DocumentStore
from uninexus.data.serialization import to_public
from uninexus.scoring.engagement import score_club, score_event
from uninexus.utils.logger import get_logger

logger = get_logger("discovery.trending")

DEFAULT_TRENDING_LIMIT = 20

Scorer = Callable[[Mapping[str, Any], datetime], float]


def rank_entities(
    entities: List[Dict[str, Any]],
    scorer: Scorer,
    now: datetime,
    limit: int = DEFAULT_TRENDING_LIMIT,
) -> List[Dict[str, Any]]:
    """
    Score, sort descending and truncate.

    Ties keep the store's order. Each returned entity is JSON-safe and
    carries its ``engagementScore``.
    """
    scored = [(scorer(entity, now), entity) for entity in entities]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    ranked = []
    for score, entity in scored[:limit]:
        public = to_public(entity)
        public["engagementScore"] = score
        ranked.append(public)
    return ranked


class TrendingService:
    """Cache-aside trending ranking."""

    def __init__(
        self,
        cache: CacheService,
        store: DocumentStore,
        ttl: int = DEFAULT_TTL_TRENDING,
        limit: int = DEFAULT_TRENDING_LIMIT,
    ):
        self.cache = cache
        self.store = store
        self.ttl = ttl
        self.limit = limit

    @property
    def cache_key(self) -> str:
        return self.cache.generate_key(TRENDING, OP_RANKED, TRENDING_IDENTIFIER)

    async def get_trending(self, now: Optional[datetime] = None) -> Dict[str, List[Dict[str, Any]]]:
        """Return ``{"events": [...], "clubs": [...]}``, each ranked by engagement score."""
        cached = await self.cache.get(self.cache_key, has_lists("events", "clubs"))
        if cached is not None:
            logger.debug("Returning cached trending data")
            return cached

        now = now or datetime.now(timezone.utc)
        events = await self.store.find(
            EVENTS_COLLECTION, {"isPublic": True, "startTime": {"$gte": now}}
        )
        clubs = await self.store.find(CLUBS_COLLECTION, {"isVerified": True})

        data = {
            "events": rank_entities(events, score_event, now, self.limit),
            "clubs": rank_entities(clubs, score_club, now, self.limit),
        }
        logger.info(
            f"Ranked {len(events)} events and {len(clubs)} clubs "
            f"(kept {len(data['events'])}/{len(data['clubs'])})"
        )

        await self.cache.set(self.cache_key, data, self.ttl)
        return data
