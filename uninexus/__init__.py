"""
UniNexus read path

Cache-aside acceleration and engagement ranking for campus events and clubs:
- Deterministic cache keys from normalized filter descriptors
- Redis adapter that degrades to direct queries when the cache is down
- Namespace invalidation after mutations
- Time-decayed engagement scores for trending
"""

from uninexus.cache import CacheService, RedisCacheStore
from uninexus.core.config import UniNexusConfig, get_config, set_config
from uninexus.scoring import score_club, score_event

__all__ = [
    'CacheService',
    'RedisCacheStore',
    'UniNexusConfig',
    'get_config',
    'set_config',
    'score_event',
    'score_club',
]

__version__ = '0.1.0'
