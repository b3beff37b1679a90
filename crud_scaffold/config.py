# crud_scaffold/config.py

"""
Configuration for the CRUD scaffold.

Values are read from environment variables (and an optional ``.env`` file)
through pydantic-settings, with defaults suitable for local development:

    DATABASE_URL=postgresql+psycopg://app:secret@db/app
    LOG_FORMAT=console
    CORS_ORIGINS=http://localhost:3000,https://example.org

Typical usage:

    from crud_scaffold.config import get_settings

    settings = get_settings()
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Central configuration registry.
    """

    # --- Application Meta ---
    APP_NAME: str = "crud-scaffold"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False
    VERSION: str = "0.1.0"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # --- Persistence ---
    DATABASE_URL: str = "sqlite:///./crud_scaffold.db"
    DATABASE_ECHO: bool = False

    # --- HTTP ---
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    API_PREFIX: str = ""
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]
    MAX_PAGE_SIZE: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        # Environment values arrive raw: a JSON list or "http://a,http://b".
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("API_PREFIX")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value

    @field_validator("MAX_PAGE_SIZE")
    @classmethod
    def _positive_page_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("MAX_PAGE_SIZE must be at least 1")
        return value


# Process-wide settings instance
_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Return the global Settings instance, creating it from the environment
    on first use.
    """
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings()
    return _SETTINGS


def set_settings(settings: Optional[Settings]) -> None:
    """
    Replace the global Settings instance (``None`` resets it).

    Mainly useful for tests.
    """
    global _SETTINGS
    _SETTINGS = settings


__all__ = ["AppEnv", "Settings", "get_settings", "set_settings"]
