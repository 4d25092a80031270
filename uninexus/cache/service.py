"""
Cache-aside orchestration over the Redis adapter.

Usage discipline (enforced by callers): read before compute, populate after
compute, invalidate after every successful mutation. Concurrent misses on
the same key may both compute and both populate; the last write wins.

Usage:
    cache = CacheService(RedisCacheStore.from_url("redis://localhost:6379/0"))

    key = cache.generate_key("discover", "search", cache.hash_filters(filters))
    data = await cache.get(key)
    if data is None:
        data = await compute()
        await cache.set(key, data, ttl=300)
"""
import json
from typing import Any, Callable, Dict, Optional

from uninexus.cache import keys
from uninexus.cache.keys import Descriptor
from uninexus.cache.policy import (
    CLUBS, EVENTS, OP_LIST, OP_PROFILE, USERS,
    DEFAULT_TTL_LIST, DEFAULT_TTL_PROFILE,
    namespaces_for_mutation,
)
from uninexus.cache.store import RedisCacheStore
from uninexus.data.serialization import json_default
from uninexus.utils.logger import get_logger

logger = get_logger("cache.service")

Validator = Callable[[Any], bool]


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def has_lists(*fields: str) -> Validator:
    """Payload is a dict whose ``fields`` are all lists."""
    def check(value: Any) -> bool:
        return isinstance(value, dict) and all(isinstance(value.get(f), list) for f in fields)
    return check


def is_page_of(field: str) -> Validator:
    """Payload is a paginated list: ``{field: [...], "pagination": {...}}``."""
    def check(value: Any) -> bool:
        return has_lists(field)(value) and isinstance(value.get("pagination"), dict)
    return check


class CacheService:
    """
    Read-through / write-around cache for JSON-serializable payloads.

    Every public method has a safe default: a failing or absent store turns
    reads into misses and writes into no-ops. Only the caller's own compute
    path can raise.
    """

    def __init__(self, store: RedisCacheStore):
        self.store = store
        self.stats: Dict[str, int] = {}
        self.reset_stats()

    def reset_stats(self) -> None:
        self.stats = {"hits": 0, "misses": 0, "sets": 0, "deletes": 0, "errors": 0}

    # ========================================================================
    # Keys
    # ========================================================================

    @staticmethod
    def generate_key(resource_type: str, operation: str, identifier: Any) -> str:
        return keys.generate_key(resource_type, operation, identifier)

    @staticmethod
    def hash_filters(descriptor: Descriptor) -> str:
        return keys.hash_filters(descriptor)

    # ========================================================================
    # Core operations
    # ========================================================================

    async def get(self, key: str, validate: Optional[Validator] = None) -> Optional[Any]:
        """
        Cached value for ``key``; None on miss, store failure or a corrupt entry.

        ``validate`` checks the decoded payload's shape. An entry that fails it
        (or decodes to null) is counted as an error plus a miss.
        """
        raw = await self.store.get(key)
        if raw is None:
            self.stats["misses"] += 1
            logger.debug(f"Cache miss: {key}")
            return None
        try:
            value = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as e:
            self.stats["errors"] += 1
            self.stats["misses"] += 1
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None
        if value is None or (validate is not None and not validate(value)):
            self.stats["errors"] += 1
            self.stats["misses"] += 1
            logger.warning(f"Discarding cache entry {key} with unexpected shape")
            return None
        self.stats["hits"] += 1
        logger.debug(f"Cache hit: {key}")
        return value

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Serialize and store ``value`` with a TTL. Failures are logged, never raised."""
        if value is None:
            return False
        try:
            payload = json.dumps(value, separators=(",", ":"), default=json_default).encode("utf-8")
        except (TypeError, ValueError) as e:
            self.stats["errors"] += 1
            logger.warning(f"Cache set skipped for {key}, value not serializable: {e}")
            return False
        stored = await self.store.set(key, payload, ttl)
        if stored:
            self.stats["sets"] += 1
            logger.debug(f"Cache set: {key} (TTL: {ttl}s)")
        else:
            self.stats["errors"] += 1
        return stored

    async def delete(self, key: str) -> None:
        deleted = await self.store.delete(key)
        self.stats["deletes"] += deleted
        logger.debug(f"Cache deleted: {key}")

    async def invalidate(self, resource_type: str) -> int:
        """Drop every cached list/detail entry of a resource type (``resource_type:*``)."""
        deleted = await self.store.delete_pattern(keys.namespace_pattern(resource_type))
        self.stats["deletes"] += deleted
        return deleted

    async def invalidate_for_mutation(self, resource_type: str) -> int:
        """Invalidate the resource namespace plus every namespace aggregating it."""
        total = 0
        for namespace in namespaces_for_mutation(resource_type):
            total += await self.invalidate(namespace)
        logger.debug(f"Invalidated caches after {resource_type} mutation ({total} keys)")
        return total

    async def ping(self) -> bool:
        return await self.store.ping()

    async def close(self) -> None:
        await self.store.close()

    # ========================================================================
    # Event / club list helpers
    # ========================================================================

    async def get_events(self, filters: Descriptor) -> Optional[Any]:
        return await self.get(self.generate_key(EVENTS, OP_LIST, self.hash_filters(filters)), is_page_of("events"))

    async def set_events(self, filters: Descriptor, data: Any, ttl: int = DEFAULT_TTL_LIST) -> bool:
        return await self.set(self.generate_key(EVENTS, OP_LIST, self.hash_filters(filters)), data, ttl)

    async def invalidate_events(self) -> int:
        return await self.invalidate(EVENTS)

    async def get_clubs(self, filters: Descriptor) -> Optional[Any]:
        return await self.get(self.generate_key(CLUBS, OP_LIST, self.hash_filters(filters)), is_page_of("clubs"))

    async def set_clubs(self, filters: Descriptor, data: Any, ttl: int = DEFAULT_TTL_LIST) -> bool:
        return await self.set(self.generate_key(CLUBS, OP_LIST, self.hash_filters(filters)), data, ttl)

    async def invalidate_clubs(self) -> int:
        return await self.invalidate(CLUBS)

    # ========================================================================
    # User profiles
    # ========================================================================

    async def get_user_profile(self, user_id: str) -> Optional[Any]:
        return await self.get(self.generate_key(USERS, OP_PROFILE, user_id), is_record)

    async def set_user_profile(self, user_id: str, profile: Any, ttl: int = DEFAULT_TTL_PROFILE) -> bool:
        return await self.set(self.generate_key(USERS, OP_PROFILE, user_id), profile, ttl)

    async def invalidate_user_profile(self, user_id: str) -> None:
        await self.delete(self.generate_key(USERS, OP_PROFILE, user_id))
