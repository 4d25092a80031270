"""
Tests for the Redis adapter's failure semantics: every error or timeout
degrades to the safe default and nothing is raised.
"""
import asyncio

from conftest import BrokenRedis, FakeRedis
from uninexus.cache.store import RedisCacheStore


def _run(coro):
    return asyncio.run(coro)


class SlowRedis(FakeRedis):
    async def get(self, key):
        await asyncio.sleep(5)
        return b"late"

    async def setex(self, key, ttl, value):
        await asyncio.sleep(5)
        return True


def test_set_then_get_returns_bytes():
    client = FakeRedis()
    store = RedisCacheStore(client)
    assert _run(store.set("events:detail:1", b'{"a":1}', 600)) is True
    assert _run(store.get("events:detail:1")) == b'{"a":1}'
    assert client.ttls["events:detail:1"] == 600


def test_missing_client_short_circuits():
    store = RedisCacheStore(None)
    assert store.available is False
    assert _run(store.get("k")) is None
    assert _run(store.set("k", b"v", 10)) is False
    assert _run(store.delete("k")) == 0
    assert _run(store.delete_pattern("events:*")) == 0
    assert _run(store.ping()) is False
    _run(store.close())


def test_connection_errors_degrade_to_defaults():
    store = RedisCacheStore(BrokenRedis())
    assert _run(store.get("k")) is None
    assert _run(store.set("k", b"v", 10)) is False
    assert _run(store.delete("k")) == 0
    assert _run(store.delete_pattern("events:*")) == 0
    assert _run(store.ping()) is False
    # close logs instead of raising
    _run(store.close())


def test_timeout_is_a_miss():
    store = RedisCacheStore(SlowRedis(), timeout_seconds=0.05)
    assert _run(store.get("k")) is None
    assert _run(store.set("k", b"v", 10)) is False


def test_delete_pattern_only_touches_namespace():
    client = FakeRedis()
    store = RedisCacheStore(client)

    async def scenario():
        await store.set("events:list:a", b"1", 300)
        await store.set("events:detail:b", b"2", 600)
        await store.set("clubs:list:a", b"3", 300)
        return await store.delete_pattern("events:*")

    assert _run(scenario()) == 2
    assert list(client.data) == ["clubs:list:a"]


def test_delete_pattern_without_matches_is_noop():
    client = FakeRedis()
    store = RedisCacheStore(client)
    _run(store.set("clubs:list:a", b"3", 300))
    assert _run(store.delete_pattern("events:*")) == 0
    assert "clubs:list:a" in client.data


def test_close_releases_client():
    client = FakeRedis()
    _run(RedisCacheStore(client).close())
    assert client.closed is True
