"""Environment-based configuration using pydantic-settings.

Supplies process-wide defaults for retry policies and logging. Explicit
``RetryPolicy`` arguments always win over these values.

Example:
    >>> from retrycase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_attempts
    2

    # Or with environment variables:
    # RETRYCASE_RETRY_MAX_ATTEMPTS=5
    # RETRYCASE_RETRY_TIMEOUT=30
    # RETRYCASE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, PositiveInt, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force console colors (None = auto-detect)")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RetrySettings(BaseSettings):
    """Default retry policy values."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_RETRY_",
        extra="ignore",
    )

    max_attempts: PositiveInt = Field(default=2, description="Total attempts including the first")
    delay: NonNegativeFloat = Field(default=0.0, allow_inf_nan=False, description="Fixed wait before each retry, in seconds")
    timeout: NonNegativeFloat | None = Field(
        default=None,
        allow_inf_nan=False,
        description="Deadline for the whole retry sequence in seconds; replaces max_attempts when set",
    )

    @computed_field
    @property
    def stop_mode(self) -> Literal["attempts", "deadline"]:
        return "deadline" if self.timeout is not None else "attempts"


class RetrycaseSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with RETRYCASE_ prefix
    and an optional .env file.

    Example environment variables:
        RETRYCASE_RETRY_MAX_ATTEMPTS=4
        RETRYCASE_RETRY_DELAY=0.25
        RETRYCASE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)


@lru_cache(maxsize=1)
def get_settings() -> RetrycaseSettings:
    """Get the global settings instance (cached)."""
    return RetrycaseSettings()


def clear_settings_cache() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
