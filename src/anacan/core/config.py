"""Configuration management for Anacan.

This module uses Pydantic Settings to load and validate configuration from
environment variables and the local ``.env.local`` file. Remote service
settings accept both the plain ``APPWRITE_*`` names and the ``VITE_APPWRITE_*``
names shared with the front end build.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MissingApiKeyError(RuntimeError):
    """Raised when an admin operation runs without an API key."""


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and ``.env.local``.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        env_prefix="ANACAN_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application Settings
    app_name: str = "Anacan"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    site_url: str = "https://anacan.az"

    # Dev Server Settings
    host: str = "0.0.0.0"
    port: int = 3000

    # Remote Schema Service
    appwrite_endpoint: str = Field(
        default="https://fra.cloud.appwrite.io/v1",
        validation_alias=AliasChoices(
            "appwrite_endpoint", "APPWRITE_ENDPOINT", "VITE_APPWRITE_ENDPOINT"
        ),
    )
    appwrite_project_id: str = Field(
        default="69580ea2002ecc4ff8e1",
        validation_alias=AliasChoices(
            "appwrite_project_id", "APPWRITE_PROJECT_ID", "VITE_APPWRITE_PROJECT_ID"
        ),
    )
    appwrite_database_id: str = Field(
        default="anacan",
        validation_alias=AliasChoices(
            "appwrite_database_id", "APPWRITE_DATABASE_ID", "VITE_APPWRITE_DATABASE_ID"
        ),
    )
    appwrite_api_key: str | None = Field(
        default=None,
        description="Admin API key, required by provisioning and seeding commands",
        validation_alias=AliasChoices("appwrite_api_key", "APPWRITE_API_KEY"),
    )
    request_timeout: float = 30.0

    # Retry Policy
    retry_max_attempts: int = Field(default=3, ge=1)
    retry_base_delay: float = Field(default=1.5, ge=0)
    retry_max_delay: float = Field(default=3.0, ge=0)
    retry_jitter: float = Field(default=0.0, ge=0)

    # Settle Delays (seconds)
    collection_settle_delay: float = Field(default=2.0, ge=0)
    attribute_settle_delay: float = Field(default=1.5, ge=0)
    index_barrier_delay: float = Field(default=2.0, ge=0)
    index_settle_delay: float = Field(default=1.5, ge=0)
    poll_attribute_status: bool = False
    attribute_poll_timeout: float = Field(default=30.0, gt=0)

    # Offline Cache
    offline_cache_url: str = "sqlite+aiosqlite:///./.anacan/offline.db"

    # Sitemap
    sitemap_max_age: int = 3600

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    @model_validator(mode="after")
    def validate_retry_delays(self) -> "Settings":
        """Validate that the retry delay cap is not below the base delay."""
        if self.retry_max_delay < self.retry_base_delay:
            raise ValueError(
                f"retry_max_delay ({self.retry_max_delay}) must be greater than or "
                f"equal to retry_base_delay ({self.retry_base_delay})"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    def require_api_key(self) -> str:
        """Return the admin API key or fail if it is not configured.

        Raises:
            MissingApiKeyError: If ``APPWRITE_API_KEY`` is not set.
        """
        if not self.appwrite_api_key:
            raise MissingApiKeyError(
                "APPWRITE_API_KEY is required in .env.local. Create one in the console: "
                f"https://cloud.appwrite.io/console/project-{self.appwrite_project_id}"
                "/settings/api-keys"
            )
        return self.appwrite_api_key


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
