"""Configuration module for the timeline store.

Provides centralized settings via pydantic-settings and an optional
YAML config file loader.
"""

from snl_timeline.config.exceptions import ConfigurationError
from snl_timeline.config.loader import load_config
from snl_timeline.config.settings import (
    LoggingSettings,
    Settings,
    TimelineSettings,
    get_settings,
)

__all__ = [
    "ConfigurationError",
    "get_settings",
    "load_config",
    "LoggingSettings",
    "Settings",
    "TimelineSettings",
]
