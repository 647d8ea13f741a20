"""Application configuration settings."""

from __future__ import annotations

import logging
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
        default="sqlite:///./cargomatch.db",
        description="SQLAlchemy URL of the database backing the document store",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used when exposing timestamps to callers",
    )
    persistence_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound in seconds for every call to the document store",
        gt=0,
    )
    allow_duplicate_applications: bool = Field(
        default=True,
        description="Whether a driver may submit several open applications for one job",
    )
    notification_feed_limit: int = Field(
        default=20,
        description="Number of notifications kept in a live notification feed",
        gt=0,
    )
    log_level: str = Field(
        default="INFO",
        description="Level applied by configure_logging()",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


def configure_logging(settings: Settings | None = None) -> None:
    """Install a basic root handler using the configured ``log_level``."""

    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["Settings", "get_settings", "reset_settings_cache", "configure_logging"]
