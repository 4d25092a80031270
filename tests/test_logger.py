import asyncio
import logging

from conftest import BrokenRedis
from uninexus.cache.store import RedisCacheStore
from uninexus.utils.logger import get_logger


def test_child_loggers_hang_off_package_logger():
    assert get_logger("cache.store").name == "uninexus.cache.store"
    package = get_logger()
    assert package is logging.getLogger("uninexus")
    assert package.handlers
    assert package.propagate is False


def test_cache_failures_log_warning(caplog):
    package = logging.getLogger("uninexus")
    package.propagate = True
    try:
        with caplog.at_level(logging.WARNING, logger="uninexus"):
            asyncio.run(RedisCacheStore(BrokenRedis()).get("events:detail:1"))
    finally:
        package.propagate = False
    assert any("Cache get error for events:detail:1" in r.getMessage() for r in caplog.records)
