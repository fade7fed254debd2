"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DEFAULT_DAILY_LIMIT = 5


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    daily_limit: int = Field(
        DEFAULT_DAILY_LIMIT,
        description="Generations allowed per anonymous user per UTC day",
        validation_alias=AliasChoices("APP_DAILY_LIMIT", "DAILY_LIMIT"),
    )
    max_upload_size_mb: int = Field(
        10,
        description="Maximum image upload size in megabytes",
    )
    admin_key_required: bool = Field(
        True,
        description="Whether fabric catalog writes require an admin key",
    )
    admin_api_keys: str | None = Field(
        None,
        description="Comma-separated list of admin keys accepted in X-Admin-Key",
    )
    user_cookie_name: str = Field(
        "user_id",
        description="Cookie carrying the anonymous user identifier",
    )
    user_cookie_max_age_seconds: int = Field(
        60 * 60 * 24 * 365,
        description="Lifetime of the anonymous user cookie",
    )
    secure_cookies: bool = Field(
        False,
        description="Mark the user cookie Secure (enable behind HTTPS)",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("daily_limit", mode="before")
    @classmethod
    def _lenient_daily_limit(cls, value: Any) -> int:
        # Unset, garbage or non-positive values fall back to the default quota
        if value is None:
            return DEFAULT_DAILY_LIMIT
        try:
            parsed = int(str(value).strip())
        except ValueError:
            return DEFAULT_DAILY_LIMIT
        return parsed if parsed >= 1 else DEFAULT_DAILY_LIMIT


class KVSettings(BaseSettings):
    """Key-value store backend configuration."""

    backend: str = Field(
        "memory",
        description="Storage backend: 'memory' or 'upstash'",
    )
    rest_api_url: str | None = Field(
        None,
        description="Upstash / Vercel KV REST endpoint",
    )
    rest_api_token: str | None = Field(
        None,
        description="Bearer token for the REST endpoint",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Per-command HTTP timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="KV_",
        case_sensitive=False,
    )


class ImageGenSettings(BaseSettings):
    """Image generation provider configuration."""

    provider: str = Field(
        "openai",
        description="Image generation provider name",
    )
    model: str = Field(
        "gpt-image-1",
        description="Model used for image edits",
    )
    api_key: str | None = Field(
        None,
        description="API key for the provider",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint",
    )
    size: str = Field(
        "auto",
        description="Requested output size (e.g., 1024x1024, auto)",
    )
    timeout_seconds: float = Field(
        120.0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_",
        case_sensitive=False,
    )


class MediaSettings(BaseSettings):
    """Media storage configuration for uploaded and generated images."""

    root_dir: str = Field(
        "media",
        description="Directory where images are written",
    )
    base_url: str = Field(
        "/media",
        description="Public URL prefix the media directory is served under",
    )
    fetch_timeout_seconds: float = Field(
        30.0,
        description="Timeout when downloading remote images",
    )
    allowed_fetch_hosts: str | None = Field(
        None,
        description="Comma-separated hosts remote sofa images may come from (unset allows any)",
    )

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(0, description="Rotate the log file at this size (0 disables)")
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to accept and echo request ids",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.

    Environments:
    - development: Local development (in-memory KV)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    kv: KVSettings = Field(default_factory=KVSettings)
    image: ImageGenSettings = Field(default_factory=ImageGenSettings)
    media: MediaSettings = Field(default_factory=MediaSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


settings = Settings()
