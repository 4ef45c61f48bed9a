"""Configuration loaded from FALLIBLE_* environment variables."""

from .settings import (
    FallibleSettings,
    LoggingSettings,
    clear_settings_cache,
    configure_logging_from_settings,
    get_settings,
)

__all__ = [
    "FallibleSettings",
    "LoggingSettings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging_from_settings",
]
