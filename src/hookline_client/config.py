"""
Configuration settings for the Hookline backend client.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Hookline Client"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Backend ===
    API_BASE_URL: str = "http://localhost:3000/api"
    REQUEST_DEADLINE_MS: int = 30000  # Per-attempt deadline, not per call
    HTTP_MAX_CONNECTIONS: int = 10
    HTTP_MAX_KEEPALIVE: int = 5

    # === Retry & Backoff ===
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_BASE_DELAY_MS: int = 1000
    RETRY_MAX_DELAY_MS: int = 30000
    RETRY_BACKOFF_MULTIPLIER: float = 2.0

    # === Credential storage ===
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 10
    REDIS_SOCKET_TIMEOUT: float = 5.0
    TOKEN_STORAGE_KEY: str = "auth_token"

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()


@lru_cache()
def get_settings() -> Settings:
    """Get settings singleton."""
    return settings
