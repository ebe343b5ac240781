"""Configuration - environment-driven defaults via pydantic-settings."""

from .settings import LoggingSettings, RetrycaseSettings, RetrySettings, clear_settings_cache, get_settings

__all__ = [
    "RetrycaseSettings",
    "LoggingSettings",
    "RetrySettings",
    "get_settings",
    "clear_settings_cache",
]
