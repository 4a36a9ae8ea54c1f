"""Configuration loading, schema, and defaults."""

from builddiff.config.defaults import DEFAULT_EXCLUSIONS
from builddiff.config.loader import ConfigError, load_config
from builddiff.config.schema import BuildDiffConfig

__all__ = [
    "BuildDiffConfig",
    "ConfigError",
    "DEFAULT_EXCLUSIONS",
    "load_config",
]
