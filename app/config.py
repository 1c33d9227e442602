"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone name or UTC offset used for timestamps",
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level applied when the application starts",
    )
    database_pool_timeout_seconds: float = Field(
        default=10.0,
        description="Seconds to wait for a pooled database connection before failing",
        gt=0,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API from a browser (JSON list)",
    )
    directory_lookup_max_attempts: int = Field(
        default=3,
        description="Attempts made against the user directory before giving up",
        ge=1,
    )
    directory_lookup_backoff_seconds: float = Field(
        default=0.2,
        description="Delay before the first directory lookup retry",
        ge=0,
    )
    directory_lookup_backoff_multiplier: float = Field(
        default=2.0,
        description="Factor applied to the retry delay after every failed attempt",
        ge=1,
    )
    directory_lookup_timeout_seconds: float = Field(
        default=5.0,
        description="Maximum time a single directory lookup may take",
        gt=0,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
