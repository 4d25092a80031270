"""Pytest configuration for the UniNexus read-path tests."""

import fnmatch
from datetime import datetime, timedelta, timezone

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from uninexus.cache.service import CacheService
from uninexus.cache.store import RedisCacheStore
from uninexus.data.document_store import InMemoryDocumentStore

# Noon UTC, so "today" still has half a day left
NOW = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Redis test doubles.  They speak the subset of the redis.asyncio.Redis API
# the adapter uses (GET / SETEX / DEL / SCAN / PING / ACLOSE).
# ============================================================================

class FakeRedis:
    """In-process async Redis with glob matching for SCAN."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        if isinstance(value, str):
            value = value.encode("utf-8")
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                self.ttls.pop(key, None)
                removed += 1
        return removed

    async def scan_iter(self, match=None, count=None):
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True


class BrokenRedis:
    """Every call fails the way an unreachable server does."""

    def _refuse(self, *args, **kwargs):
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    async def get(self, key):
        self._refuse()

    async def setex(self, key, ttl, value):
        self._refuse()

    async def delete(self, *keys):
        self._refuse()

    def scan_iter(self, match=None, count=None):
        self._refuse()

    async def ping(self):
        self._refuse()

    async def aclose(self):
        self._refuse()


class CountingStore(InMemoryDocumentStore):
    """In-memory store that counts queries, to observe cache hits."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.find_calls = 0
        self.find_one_calls = 0

    async def find(self, *args, **kwargs):
        self.find_calls += 1
        return await super().find(*args, **kwargs)

    async def find_one(self, *args, **kwargs):
        self.find_one_calls += 1
        return await super().find_one(*args, **kwargs)


class FailingStore(InMemoryDocumentStore):
    """Store whose reads fail, to check data-store errors propagate."""

    async def find(self, *args, **kwargs):
        raise RuntimeError("document store unavailable")

    async def find_one(self, *args, **kwargs):
        raise RuntimeError("document store unavailable")


# ============================================================================
# Record builders
# ============================================================================

def event_doc(title="Event", starts_in=timedelta(days=1), now=NOW, **fields):
    doc = {
        "title": title,
        "description": fields.pop("description", f"{title} description"),
        "category": fields.pop("category", "Tech"),
        "tags": fields.pop("tags", []),
        "isPublic": fields.pop("isPublic", True),
        "startTime": now + starts_in,
        "endTime": now + starts_in + timedelta(hours=2),
        "stats": {
            "attendeeCount": fields.pop("attendees", 0),
            "viewCount": fields.pop("views", 0),
        },
        "createdAt": now - timedelta(days=10),
        "updatedAt": now - timedelta(days=10),
    }
    doc.update(fields)
    return doc


def club_doc(name="Club", updated_ago=timedelta(days=1), now=NOW, **fields):
    doc = {
        "name": name,
        "description": fields.pop("description", f"{name} description"),
        "category": fields.pop("category", "Tech"),
        "email": f"{name.lower().replace(' ', '')}@uni.edu",
        "isVerified": fields.pop("isVerified", True),
        "stats": {
            "memberCount": fields.pop("members", 0),
            "eventCount": fields.pop("events", 0),
        },
        "createdAt": now - timedelta(days=100),
        "updatedAt": now - updated_ago,
    }
    doc.update(fields)
    return doc


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    return CacheService(RedisCacheStore(fake_redis, timeout_seconds=0.2))


@pytest.fixture
def broken_cache():
    return CacheService(RedisCacheStore(BrokenRedis(), timeout_seconds=0.2))


@pytest.fixture
def store():
    return CountingStore()
