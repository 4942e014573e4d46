"""
Configuration module for the Flashdeck backend.

The Settings object centralizes environment-driven configuration with strict
typing and validation rules so that the rest of the codebase can rely on a
single source of truth.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COVER_PHOTO_URL = (
    "https://firebasestorage.googleapis.com/v0/b/deck-f429c.appspot.com/o/"
    "deckCovers%2Fdefault%2FdeckDefault.png?alt=media"
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    project_name: str = Field(default="Flashdeck Backend", alias="PROJECT_NAME")
    environment: Literal["local", "test", "staging", "production"] = Field(
        default="local",
        alias="APP_ENV",
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(alias="DATABASE_URL")

    openai_api_key: SecretStr = Field(alias="OPENAI_API_KEY")
    embedding_model: str = Field(default="text-embedding-3-small", alias="EMBEDDING_MODEL")
    embedding_dimensions: int = Field(default=768, alias="EMBEDDING_DIMENSIONS")
    embedding_timeout_seconds: float = Field(default=20.0, alias="EMBEDDING_TIMEOUT_SECONDS")

    moderation_webhook_url: str | None = Field(
        default=None,
        alias="MODERATION_WEBHOOK_URL",
        description="Endpoint notified when an owner asks to publish a private deck.",
    )
    moderation_timeout_seconds: float = Field(default=20.0, alias="MODERATION_TIMEOUT_SECONDS")

    search_distance_threshold: float = Field(
        default=0.41,
        alias="SEARCH_DISTANCE_THRESHOLD",
        description="Maximum cosine distance for a deck to count as a semantic match.",
    )
    search_result_limit: int = Field(default=50, alias="SEARCH_RESULT_LIMIT")
    recommendation_history_size: int = Field(default=5, alias="RECOMMENDATION_HISTORY_SIZE")
    default_cover_photo_url: str = Field(
        default=DEFAULT_COVER_PHOTO_URL,
        alias="DEFAULT_COVER_PHOTO_URL",
    )

    @field_validator("database_url", "embedding_model", mode="before")
    @classmethod
    def _strip_string(cls, value: str | None, info: ValidationInfo) -> str:
        if value is None:
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must be provided.")
        trimmed = value.strip()
        if not trimmed:
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must not be empty.")
        return trimmed

    @field_validator("openai_api_key", mode="after")
    @classmethod
    def _validate_secret(cls, secret: SecretStr, info: ValidationInfo) -> SecretStr:
        if not secret.get_secret_value().strip():
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must not be empty.")
        return secret

    @field_validator("moderation_webhook_url")
    @classmethod
    def _validate_webhook_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        candidate = value.strip()
        if not candidate:
            return None
        if not candidate.startswith(("http://", "https://")):
            raise ValueError("MODERATION_WEBHOOK_URL must be an http(s) URL.")
        return candidate

    @field_validator("embedding_dimensions", "search_result_limit", "recommendation_history_size")
    @classmethod
    def _validate_positive(cls, value: int, info: ValidationInfo) -> int:
        if value <= 0:
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must be a positive integer.")
        return value

    @field_validator("embedding_timeout_seconds", "moderation_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float, info: ValidationInfo) -> float:
        if value <= 0:
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must be positive.")
        return value

    @field_validator("search_distance_threshold")
    @classmethod
    def _validate_threshold(cls, value: float) -> float:
        # Cosine distance lives in [0, 2].
        if not 0 < value <= 2:
            raise ValueError("SEARCH_DISTANCE_THRESHOLD must be within (0, 2].")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance so configuration is evaluated once."""
    return Settings()  # type: ignore[call-arg]


settings = get_settings()
