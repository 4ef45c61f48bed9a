"""Environment-based configuration using pydantic-settings.

Only the logging layer is configurable; the Result core reads no settings.

Example:
    >>> from fallible.config import get_settings
    >>> get_settings().logging.level
    'INFO'

    # Or with environment variables:
    # FALLIBLE_LOG_LEVEL=DEBUG
    # FALLIBLE_LOG_FORMAT=json
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from ..observability.logging import LogRenderer


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FALLIBLE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force console colors on/off; None auto-detects a TTY")
    include_stack_trace: bool = Field(default=True, description="Attach Fail stack traces to logged results")

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class FallibleSettings(BaseSettings):
    """Root settings, loaded from FALLIBLE_* environment variables and .env files.

    Example environment variables:
        FALLIBLE_DEBUG=true
        FALLIBLE_LOG_LEVEL=DEBUG
        FALLIBLE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="FALLIBLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @computed_field
    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> FallibleSettings:
    """Get the global settings instance (cached)."""
    return FallibleSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() rereads the environment."""
    get_settings.cache_clear()


def configure_logging_from_settings(settings: FallibleSettings | None = None) -> LogRenderer:
    """Apply logging settings to the global structured logger."""
    from ..observability.logging import configure_logging

    settings = settings or get_settings()
    return configure_logging(
        settings.logging.format,
        settings.effective_log_level,
        colors=settings.logging.colors,
        include_stack_trace=settings.logging.include_stack_trace,
    )
