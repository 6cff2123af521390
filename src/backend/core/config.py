"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables or a local .env file.
"""

import json
from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "StoryVault"
    APP_ENV: str = "development"
    DEBUG: bool = False
    SECRET_KEY: str = ""  # Required - loaded from environment

    # Database - PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "storyvault"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "storyvault"
    DATABASE_URL: str | None = None  # Full override, e.g. for CI databases
    DB_ECHO: bool = False

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_required_secrets(cls, v: str, info: Any) -> str:
        """Validate that required secrets are set."""
        if not v:
            raise ValueError(f"{info.field_name} must be set in environment")
        return v

    @property
    def POSTGRES_URL(self) -> str:
        """Construct the async PostgreSQL connection URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # Authentication
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Federated login providers accepted by the identity service
    FEDERATED_PROVIDERS: str = "google,github"

    # CORS - stored as comma-separated string to avoid pydantic-settings JSON parsing issues
    CORS_ORIGINS: str = "http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return _split_list(self.CORS_ORIGINS)

    @property
    def federated_providers_list(self) -> list[str]:
        """Get accepted federated providers as a list."""
        return [p.lower() for p in _split_list(self.FEDERATED_PROVIDERS)]

    # Stories
    STORY_PAGE_SIZE: int = 10
    STORY_MAX_PAGE_SIZE: int = 50
    STORY_ACCESS_TOKEN_LENGTH: int = 10
    STORY_ACCESS_TOKEN_ATTEMPTS: int = 5  # Insert retries on access token collision

    # Voting: "toggle" retracts a repeat vote, "reject" refuses it
    VOTE_POLICY: str = "toggle"

    # Platform Statistics Cache
    STATS_CACHE_TTL_MINUTES: int = 5


def _split_list(raw: str) -> list[str]:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
