"""
Redis adapter for the read-path cache.

Redis is ONLY a cache, never the source of truth. Every call carries a short
timeout and every failure degrades to the safe default: ``get`` returns
``None``, writes and deletes become no-ops. Callers never see a cache error.
"""
import asyncio
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as redis

from uninexus.utils.logger import get_logger

logger = get_logger("cache.store")


class RedisCacheStore:
    """
    Thin async client over GET / SETEX / DEL / SCAN / PING.

    ``client`` may be ``None`` (cache disabled or never connected); every
    operation then short-circuits to its default.
    """

    def __init__(self, client: Optional[Any] = None, timeout_seconds: float = 0.5):
        self.client = client
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_url(cls, url: str, timeout_seconds: float = 0.5) -> "RedisCacheStore":
        """
        Build an adapter from a redis:// or rediss:// URL.

        The connection is lazy; an unreachable server only shows up as
        failed (and swallowed) calls.
        """
        client = redis.from_url(
            url,
            decode_responses=False,
            socket_connect_timeout=timeout_seconds,
            socket_timeout=timeout_seconds,
        )
        return cls(client, timeout_seconds=timeout_seconds)

    @property
    def available(self) -> bool:
        return self.client is not None

    async def _call(self, op: str, target: str, fn: Callable[[], Awaitable[Any]], default: Any) -> Any:
        if self.client is None:
            logger.debug(f"Redis client not available, skipping cache {op}")
            return default
        try:
            return await asyncio.wait_for(fn(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(f"Cache {op} timed out for {target} after {self.timeout_seconds}s")
            return default
        except Exception as e:
            logger.warning(f"Cache {op} error for {target}: {e}")
            return default

    async def get(self, key: str) -> Optional[bytes]:
        """Raw cached bytes, or None on miss or any failure."""
        return await self._call("get", key, lambda: self.client.get(key), None)

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> bool:
        """Store ``value`` with an expiry. Returns False if the write did not happen."""
        async def _setex():
            await self.client.setex(key, ttl_seconds, value)
            return True
        return await self._call("set", key, _setex, False)

    async def delete(self, key: str) -> int:
        """Delete one key. Returns the number of keys removed (0 on failure)."""
        return await self._call("delete", key, lambda: self.client.delete(key), 0)

    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete every key matching a glob pattern in one batch.

        Zero matches is a no-op. Returns the number of keys removed.
        """
        async def _scan_and_delete():
            keys = [key async for key in self.client.scan_iter(match=pattern, count=100)]
            if not keys:
                return 0
            return await self.client.delete(*keys)

        deleted = await self._call("pattern delete", pattern, _scan_and_delete, 0)
        if deleted:
            logger.debug(f"Cache pattern deleted: {pattern} ({deleted} keys)")
        return deleted

    async def ping(self) -> bool:
        """Check if Redis is reachable."""
        return bool(await self._call("ping", "server", lambda: self.client.ping(), False))

    async def close(self) -> None:
        if self.client is None:
            return
        try:
            await self.client.aclose()
        except Exception as e:
            logger.warning(f"Error closing Redis connection: {e}")
