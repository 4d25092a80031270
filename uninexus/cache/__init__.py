"""
Read-path cache: key derivation, Redis adapter and cache-aside service.
"""
from uninexus.cache.filters import ClubListFilters, DiscoverFilters, EventListFilters
from uninexus.cache.keys import generate_key, hash_filters, normalize
from uninexus.cache.service import CacheService
from uninexus.cache.store import RedisCacheStore

__all__ = [
    "CacheService",
    "RedisCacheStore",
    "DiscoverFilters",
    "EventListFilters",
    "ClubListFilters",
    "generate_key",
    "hash_filters",
    "normalize",
]
