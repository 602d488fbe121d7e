"""
Runtime configuration helpers for the Sabagram service.

Loads DATABASE_URL and the other variables from the environment, falling back
to the .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required: must come from the environment or .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="Sabagram", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")

    # Bearer tokens are issued by the identity provider; we only verify them.
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: str | None = Field(default=None, alias="JWT_AUDIENCE")

    # Feed and interaction tuning
    feed_page_size: int = Field(default=20, alias="FEED_PAGE_SIZE")
    comment_preview_limit: int = Field(default=2, alias="COMMENT_PREVIEW_LIMIT")
    search_result_limit: int = Field(default=5, alias="SEARCH_RESULT_LIMIT")
    caption_max_length: int = Field(default=2200, alias="CAPTION_MAX_LENGTH")

    # S3-compatible object storage for post images and avatars
    storage_bucket: str | None = Field(default=None, alias="STORAGE_BUCKET")
    storage_endpoint_url: str | None = Field(default=None, alias="STORAGE_ENDPOINT_URL")
    storage_region: str | None = Field(default=None, alias="STORAGE_REGION")
    storage_public_base_url: str | None = Field(default=None, alias="STORAGE_PUBLIC_BASE_URL")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
