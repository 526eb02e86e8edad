"""
Configuration Utility - Environment Variables Management

Centralized configuration loading from .env files using pydantic-settings.
Type-safe access to all environment variables with validation.

Usage:
    from utils.config import get_settings

    settings = get_settings()
    users_path = settings.USERS_FILE
    port = settings.API_PORT
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Default run paths (CLI)
    USERS_FILE: str = Field(default="users.json")
    COMPANIES_FILE: str = Field(default="companies.json")
    OUTPUT_FILE: str = Field(default="output.txt")
    REJECTS_FILE: str | None = Field(default=None)

    # Backend API Configuration
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=4567)
    CORS_ORIGINS: str = Field(default="*")

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")

    # Application Metadata
    APP_NAME: str = Field(default="token-topup")
    APP_VERSION: str = Field(default="1.0.0")

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS origins split on commas, blanks dropped."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Singleton Settings instance
    """
    return Settings()
