"""
phsettings Core Module

Contains configuration, logging, error handling, and the legacy placeholder cache.
"""

from phsettings.core.config import Config, get_config, set_config
from phsettings.core.logging import PhSettingsLogger, get_logger, log, set_log_level
from phsettings.core.errors import (
    PhSettingsError,
    ArgumentNullError,
    LayoutParseError,
    ConfigError,
    SourceLocation,
)
from phsettings.core.cache import PlaceholderCache, get_placeholder_cache, clear_cache

__all__ = [
    "Config",
    "get_config",
    "set_config",
    "PhSettingsLogger",
    "get_logger",
    "log",
    "set_log_level",
    "PhSettingsError",
    "ArgumentNullError",
    "LayoutParseError",
    "ConfigError",
    "SourceLocation",
    "PlaceholderCache",
    "get_placeholder_cache",
    "clear_cache",
]
