"""Application configuration with Pydantic Settings.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env files.

Examples:
    >>> from pastebin.config import get_settings
    >>> get_settings().PAGE_SIZE
    10

    >>> get_settings().storage_config()
    StorageConfig(upload_dir='./uploads', thumbnail_dir='./thumbnails', ...)

Tests:
    - tests/unit/test_config.py::TestSettings
"""

import secrets
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pastebin.storage.config import StorageConfig


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        DATABASE_URL: Catalog connection string (SQLite or PostgreSQL)
        UPLOAD_DIR: Directory holding primary blobs
        THUMBNAIL_DIR: Directory holding derived thumbnails
        THUMBNAIL_SIZE: Edge length of the square thumbnail in pixels
        THUMBNAIL_PREFIX: Prefix joining a stored name to its thumbnail name
        PAGE_SIZE: Items per listing page
        MAX_UPLOAD_BYTES: Largest accepted upload
        SECRET_KEY: Signing key for session cookies
        SESSION_MAX_AGE_DAYS: Session cookie lifetime
        ADMIN_API_KEY: Key for admin endpoints (empty disables them)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./pastebin.db",
        description="Database connection string",
    )

    # Blob storage
    UPLOAD_DIR: str = Field(default="./uploads", description="Primary blob directory")
    THUMBNAIL_DIR: str = Field(default="./thumbnails", description="Thumbnail blob directory")
    THUMBNAIL_SIZE: int = Field(
        default=150,
        description="Thumbnail edge length in pixels",
        ge=16,
        le=1024,
    )
    THUMBNAIL_PREFIX: str = Field(default="thumb_", description="Thumbnail name prefix")

    # Listing and uploads
    PAGE_SIZE: int = Field(default=10, description="Items per page", ge=1, le=100)
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum upload size in bytes",
        ge=1,
    )

    # Sessions and admin
    SECRET_KEY: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        description="Session signing key (random per process when unset)",
    )
    SESSION_MAX_AGE_DAYS: int = Field(default=30, description="Session lifetime in days", ge=1)
    ADMIN_API_KEY: str = Field(default="", description="Admin key (empty disables admin endpoints)")

    # Application Settings
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(default=False, description="Enable debug mode")

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        valid_prefixes = ("sqlite", "postgresql", "postgres")
        if not any(v.startswith(prefix) for prefix in valid_prefixes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {valid_prefixes}"
            )
        return v

    @field_validator("THUMBNAIL_PREFIX")
    @classmethod
    def validate_thumbnail_prefix(cls, v: str) -> str:
        """Thumbnail prefix must be a plain, non-empty file name fragment."""
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("THUMBNAIL_PREFIX must be a non-empty file name fragment")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.DATABASE_URL.startswith("sqlite")

    def storage_config(self) -> StorageConfig:
        """Build the storage configuration from these settings."""
        return StorageConfig(
            upload_dir=self.UPLOAD_DIR,
            thumbnail_dir=self.THUMBNAIL_DIR,
            thumbnail_size=self.THUMBNAIL_SIZE,
            thumbnail_prefix=self.THUMBNAIL_PREFIX,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
