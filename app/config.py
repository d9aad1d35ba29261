# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.MONGODB_URI)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # MongoDB Configuration
    # -------------------------------------------------------------------------
    # The URI is required - app won't start without it

    MONGODB_URI: str = Field(
        ...,
        description="MongoDB connection string (e.g., mongodb://localhost:27017)"
    )

    MONGODB_DATABASE: str = Field(
        default="user_directory",
        min_length=1,
        description="Database holding the users collection"
    )

    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = Field(
        default=5000,
        ge=100,
        description="How long to wait for a reachable MongoDB server before failing"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Listing & Export Settings
    # -------------------------------------------------------------------------

    DEFAULT_PAGE_SIZE: int = Field(
        default=10,
        ge=1,
        description="Page size used when the client sends no valid limit"
    )

    MAX_PAGE_SIZE: int | None = Field(
        default=None,
        ge=1,
        description="Optional cap on the limit query parameter (unbounded when unset)"
    )

    EXPORT_DIR: str | None = Field(
        default=None,
        description="Directory for temporary CSV exports (system temp dir when unset)"
    )

    EXPORT_BATCH_SIZE: int = Field(
        default=500,
        ge=1,
        le=100_000,
        description="Number of users written to the CSV file per batch"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
