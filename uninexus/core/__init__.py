"""Core configuration."""
from uninexus.core.config import ConfigurationError, UniNexusConfig, get_config, set_config

__all__ = ["ConfigurationError", "UniNexusConfig", "get_config", "set_config"]
