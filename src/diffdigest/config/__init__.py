"""Configuration loading, schema, and defaults."""

from diffdigest.config.loader import ConfigError, load_config
from diffdigest.config.schema import DiffDigestConfig

__all__ = [
    "ConfigError",
    "DiffDigestConfig",
    "load_config",
]
