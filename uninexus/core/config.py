"""
Configuration management for UniNexus.

Loads settings from YAML config file, applies environment overrides and
provides typed access.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from uninexus.cache.policy import (
    DEFAULT_TTL_DETAIL, DEFAULT_TTL_LIST, DEFAULT_TTL_PROFILE,
    DEFAULT_TTL_SEARCH, DEFAULT_TTL_TRENDING,
)

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()


def _project_root() -> Path:
    """Return project root (parent of uninexus package)."""
    return Path(__file__).resolve().parent.parent.parent


DEFAULT_CONFIG_PATH = _project_root() / "config" / "default.yaml"

_TRUTHY = ("1", "true", "yes", "on")


class ConfigurationError(RuntimeError):
    """Raised at startup when the configuration cannot serve traffic safely."""


@dataclass
class UniNexusConfig:
    """Configuration for the read path (cache, data store, ranking limits)."""

    # Cache store
    redis_url: str = "redis://localhost:6379/0"
    cache_enabled: bool = True
    cache_timeout_seconds: float = 0.5     # Per-call ceiling for every Redis round trip

    # TTLs (seconds)
    ttl_list: int = DEFAULT_TTL_LIST  # Event/club list pages
    ttl_detail: int = DEFAULT_TTL_DETAIL  # Single event/club views
    ttl_search: int = DEFAULT_TTL_SEARCH  # Discover results
    ttl_trending: int = DEFAULT_TTL_TRENDING  # The single trending view
    ttl_profile: int = DEFAULT_TTL_PROFILE  # User profiles

    # Document store
    mongo_url: str = ""                    # Required unless in_memory_db
    mongo_db: str = "uninexus"
    mongo_timeout_ms: int = 5000
    in_memory_db: bool = False             # Development only, writes are lost on restart

    # Result sizes
    trending_limit: int = 20
    discover_limit: int = 50
    list_default_limit: int = 20
    list_max_limit: int = 100

    # Calendar windows (discover "today")
    campus_timezone: str = "UTC"

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "UniNexusConfig":
        """Load configuration from YAML file, then apply environment overrides."""
        path = config_path or DEFAULT_CONFIG_PATH
        data: Dict[str, Any] = {}
        if path.exists():
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}

        cache_config = data.get('cache', {})
        ttl_config = cache_config.get('ttl', {})
        database_config = data.get('database', {})
        discovery_config = data.get('discovery', {})
        listing_config = data.get('listing', {})

        config = cls(
            redis_url=cache_config.get('redis_url', cls.redis_url),
            cache_enabled=cache_config.get('enabled', cls.cache_enabled),
            cache_timeout_seconds=cache_config.get('timeout_seconds', cls.cache_timeout_seconds),
            ttl_list=ttl_config.get('list', cls.ttl_list),
            ttl_detail=ttl_config.get('detail', cls.ttl_detail),
            ttl_search=ttl_config.get('search', cls.ttl_search),
            ttl_trending=ttl_config.get('trending', cls.ttl_trending),
            ttl_profile=ttl_config.get('profile', cls.ttl_profile),
            mongo_url=database_config.get('mongo_url', cls.mongo_url) or "",
            mongo_db=database_config.get('name', cls.mongo_db),
            mongo_timeout_ms=database_config.get('timeout_ms', cls.mongo_timeout_ms),
            in_memory_db=database_config.get('in_memory', cls.in_memory_db),
            trending_limit=discovery_config.get('trending_limit', cls.trending_limit),
            discover_limit=discovery_config.get('discover_limit', cls.discover_limit),
            list_default_limit=listing_config.get('default_limit', cls.list_default_limit),
            list_max_limit=listing_config.get('max_limit', cls.list_max_limit),
            campus_timezone=discovery_config.get('campus_timezone', cls.campus_timezone),
        )
        config.apply_env()
        return config

    def apply_env(self) -> None:
        """Override fields from environment variables when they are set."""
        self.redis_url = os.getenv("REDIS_URL", self.redis_url)
        self.mongo_url = os.getenv("MONGO_URL", self.mongo_url)
        self.mongo_db = os.getenv("MONGO_DB", self.mongo_db)

        enabled = os.getenv("CACHE_ENABLED")
        if enabled is not None:
            self.cache_enabled = enabled.lower() in _TRUTHY

        in_memory = os.getenv("UNINEXUS_IN_MEMORY_DB")
        if in_memory is not None:
            self.in_memory_db = in_memory.lower() in _TRUTHY

        self.campus_timezone = os.getenv("CAMPUS_TIMEZONE", self.campus_timezone)

        timeout = os.getenv("CACHE_TIMEOUT_SECONDS")
        if timeout:
            self.cache_timeout_seconds = float(timeout)

        self.ttl_list = int(os.getenv("CACHE_TTL_LIST", self.ttl_list))
        self.ttl_detail = int(os.getenv("CACHE_TTL_DETAIL", self.ttl_detail))
        self.ttl_search = int(os.getenv("CACHE_TTL_SEARCH", self.ttl_search))
        self.ttl_trending = int(os.getenv("CACHE_TTL_TRENDING", self.ttl_trending))
        self.ttl_profile = int(os.getenv("CACHE_TTL_PROFILE", self.ttl_profile))


# Global config instance
_config: Optional[UniNexusConfig] = None


def get_config() -> UniNexusConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = UniNexusConfig.from_yaml()
    return _config


def set_config(config: UniNexusConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
