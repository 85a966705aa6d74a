"""
Application Settings.

Centralized configuration using Pydantic Settings with environment variable loading.
Every setting has a default so the CLI runs out of the box; the AI gateway
simply reports itself unavailable until ANTHROPIC_API_KEY is provided.

Storage:
    storage_backend="file" keeps one JSON file per state slot under storage_dir.
    storage_backend="redis" requires redis_url.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Anthropic (AI Gateway)
    # -------------------------------------------------------------------------
    anthropic_api_key: SecretStr | None = Field(
        default=None, description="Anthropic API key for Claude"
    )
    gateway_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model used for discovery and suggestions",
    )
    gateway_max_tokens: int = Field(
        default=4096,
        ge=1,
        description="Maximum tokens per gateway response",
    )
    gateway_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout passed to the Anthropic client",
    )

    # -------------------------------------------------------------------------
    # Persisted Store
    # -------------------------------------------------------------------------
    storage_backend: Literal["memory", "file", "redis"] = Field(
        default="file",
        description="Key-value medium backing the persisted store",
    )
    storage_dir: Path = Field(
        default=Path(".soko-link"),
        description="Directory holding one JSON file per state slot (file backend)",
    )
    storage_key_prefix: str = Field(
        default="soko-link-",
        description="Prefix applied to every state slot key",
    )
    redis_url: str | None = Field(default=None, description="Redis connection URL")

    # -------------------------------------------------------------------------
    # Marketplace
    # -------------------------------------------------------------------------
    default_community_location: str = Field(
        default="Kenya",
        description="Location used when browsing Soko Mtaani without a search",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="structlog renderer",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @property
    def gateway_configured(self) -> bool:
        """Check whether an API key is available for the AI gateway."""
        return bool(
            self.anthropic_api_key and self.anthropic_api_key.get_secret_value().strip()
        )

    @model_validator(mode="after")
    def validate_storage_settings(self) -> "Settings":
        """Validate that the chosen storage backend is usable."""
        if self.storage_backend == "redis" and not self.redis_url:
            raise ValueError("redis_url must be set when storage_backend is 'redis'")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()
