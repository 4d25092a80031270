"""
Tests for configuration loading: YAML sections, defaults and environment
overrides.
"""
import pytest

from uninexus.core.config import DEFAULT_CONFIG_PATH, UniNexusConfig

ENV_VARS = (
    "REDIS_URL", "MONGO_URL", "MONGO_DB", "CACHE_ENABLED", "CACHE_TIMEOUT_SECONDS",
    "CACHE_TTL_LIST", "CACHE_TTL_DETAIL", "CACHE_TTL_SEARCH", "CACHE_TTL_TRENDING", "CACHE_TTL_PROFILE",
    "UNINEXUS_IN_MEMORY_DB", "CAMPUS_TIMEZONE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_match_cache_policy():
    config = UniNexusConfig()
    assert (config.ttl_list, config.ttl_detail, config.ttl_search, config.ttl_trending, config.ttl_profile) == (
        300, 600, 300, 600, 600,
    )
    assert config.trending_limit == 20
    assert config.discover_limit == 50


def test_bundled_yaml_loads():
    config = UniNexusConfig.from_yaml(DEFAULT_CONFIG_PATH)
    assert config.in_memory_db is False
    assert config.mongo_url == ""
    assert config.campus_timezone == "UTC"
    assert config.cache_enabled is True
    assert config.redis_url.startswith("redis://")
    assert config.mongo_db == "uninexus"


def test_missing_file_gives_defaults(tmp_path):
    config = UniNexusConfig.from_yaml(tmp_path / "absent.yaml")
    assert config == UniNexusConfig()


def test_yaml_sections(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text(
        "cache:\n"
        "  enabled: false\n"
        "  redis_url: redis://cache:6379/2\n"
        "  ttl:\n"
        "    search: 120\n"
        "database:\n"
        "  mongo_url: mongodb://db:27017\n"
        "discovery:\n"
        "  discover_limit: 10\n"
        "listing:\n"
        "  max_limit: 50\n"
    )
    config = UniNexusConfig.from_yaml(path)
    assert config.cache_enabled is False
    assert config.redis_url == "redis://cache:6379/2"
    assert config.ttl_search == 120
    assert config.ttl_list == 300
    assert config.mongo_url == "mongodb://db:27017"
    assert config.discover_limit == 10
    assert config.list_max_limit == 50


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("REDIS_URL", "rediss://managed:6380/0")
    monkeypatch.setenv("CACHE_ENABLED", "0")
    monkeypatch.setenv("CACHE_TIMEOUT_SECONDS", "1.5")
    monkeypatch.setenv("CACHE_TTL_TRENDING", "60")
    monkeypatch.setenv("MONGO_DB", "uninexus_test")

    config = UniNexusConfig.from_yaml(tmp_path / "absent.yaml")

    assert config.redis_url == "rediss://managed:6380/0"
    assert config.cache_enabled is False
    assert config.cache_timeout_seconds == 1.5
    assert config.ttl_trending == 60
    assert config.mongo_db == "uninexus_test"


def test_in_memory_opt_in_and_campus_timezone(tmp_path, monkeypatch):
    path = tmp_path / "dev.yaml"
    path.write_text(
        "database:\n"
        "  in_memory: true\n"
        "discovery:\n"
        "  campus_timezone: America/Chicago\n"
    )
    config = UniNexusConfig.from_yaml(path)
    assert config.in_memory_db is True
    assert config.campus_timezone == "America/Chicago"

    monkeypatch.setenv("UNINEXUS_IN_MEMORY_DB", "0")
    monkeypatch.setenv("CAMPUS_TIMEZONE", "Europe/Berlin")
    config = UniNexusConfig.from_yaml(path)
    assert config.in_memory_db is False
    assert config.campus_timezone == "Europe/Berlin"
