# app/config.py
"""Application settings, read from INVOICES_* environment variables or .env."""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INVOICES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_TITLE: str = "Invoice Dashboard API"
    DATABASE_URL: str = Field(default="sqlite:///db.sqlite")
    # IANA zone used to stamp the submission day on new invoices
    TIMEZONE: str = Field(default="UTC")
    LOG_LEVEL: str = Field(default="INFO")
    ROUTE_CACHE_MAX_SIZE: int = Field(default=256, ge=1)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
