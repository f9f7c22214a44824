# /backend/app/core/config.py

import json
import logging
from typing import Literal

from pydantic import AliasChoices, Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def split_origins(raw: str | None) -> list[str]:
    """Accept a JSON list or a comma-separated string; blank entries are dropped."""
    if not raw or not raw.strip():
        return []
    try:
        loaded = json.loads(raw)
    except json.JSONDecodeError:
        loaded = None
    items = loaded if isinstance(loaded, list) else raw.split(",")
    return [str(item).strip() for item in items if str(item).strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=False
    )

    # --- Environment & Debug ---
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = Field(
        default="development", validation_alias="APP_ENV"
    )
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG_MODE", "DEBUG"))
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
    )

    # --- Server Configuration ---
    SERVER_HOST: str = Field(default="0.0.0.0", validation_alias="SERVER_HOST")
    SERVER_PORT: int = Field(default=5000, validation_alias=AliasChoices("PORT", "SERVER_PORT"))

    # --- Core Application Settings ---
    APP_NAME: str = Field(default="Tileboard", validation_alias="APP_NAME")
    APP_VERSION: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    APP_DESCRIPTION: str = Field(
        default="API for the tile productivity board: tiles, photos, settings and backups.",
        validation_alias="APP_DESCRIPTION",
    )
    API_V1_STR: str = Field(default="/api/v1", validation_alias="API_V1_STR")

    # --- Database ---
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./tileboard.db",
        description="SQLAlchemy async URL. postgresql:// URLs are rewritten to asyncpg.",
        validation_alias="DATABASE_URL",
    )
    DB_ECHO: bool = Field(default=False, validation_alias="DB_ECHO")
    DB_POOL_SIZE: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    DB_MAX_OVERFLOW: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")
    DB_CREATE_ALL: bool = Field(
        default=True,
        description="Create missing tables on startup instead of relying on Alembic.",
        validation_alias="DB_CREATE_ALL",
    )

    # --- Board behaviour ---
    DATA_DIR: str = Field(
        default="./data",
        description="Directory used by the JSON file storage adapter.",
        validation_alias="DATA_DIR",
    )
    SAVE_DEBOUNCE_MS: int = Field(default=500, ge=0, validation_alias="SAVE_DEBOUNCE_MS")
    BACKUP_HISTORY_LIMIT: int = Field(default=10, ge=1, validation_alias="BACKUP_HISTORY_LIMIT")
    NOTIFICATION_LIMIT: int = Field(default=50, ge=1, validation_alias="NOTIFICATION_LIMIT")
    DUE_SOON_DAYS: int = Field(default=3, ge=0, validation_alias="DUE_SOON_DAYS")
    MAINTENANCE_ON_STARTUP: bool = Field(
        default=True,
        description="Prune orphan photos and expire share links when the app starts.",
        validation_alias="MAINTENANCE_ON_STARTUP",
    )

    # --- CORS ---
    cors_origins_raw: str | None = Field(
        default='["http://localhost:5173","http://localhost:5000"]',
        description="JSON list or comma-separated origins.",
        validation_alias=AliasChoices("BACKEND_CORS_ORIGINS", "BACKEND_CORS_ORIGINS_ENV"),
    )

    @model_validator(mode="after")
    def _apply_debug_overrides(self) -> "Settings":
        if self.DEBUG and (self.LOG_LEVEL != "DEBUG" or not self.DB_ECHO):
            logger.info("DEBUG mode is ON: forcing LOG_LEVEL=DEBUG and DB_ECHO.")
            self.LOG_LEVEL = "DEBUG"
            self.DB_ECHO = True
        return self

    @property
    def BACKEND_CORS_ORIGINS(self) -> list[str]:
        return split_origins(self.cors_origins_raw)

    @computed_field(repr=False)
    @property
    def ASYNC_DATABASE_URL(self) -> str:
        url = self.DATABASE_URL
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix) :]
        return url

    @property
    def SYNC_DATABASE_URL(self) -> str:
        """Driver-less URL for Alembic offline mode, which only renders SQL."""
        return self.ASYNC_DATABASE_URL.replace("+asyncpg", "").replace("+aiosqlite", "")

    @property
    def SAVE_DEBOUNCE_SECONDS(self) -> float:
        return self.SAVE_DEBOUNCE_MS / 1000


settings = Settings()
