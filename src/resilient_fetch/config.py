"""
Configuration settings for the resilient fetcher.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "resilient-fetch"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Retry Policy ===
    FETCH_MAX_ATTEMPTS: int = 3
    FETCH_DELAY_MS: int = 1000  # Fixed wait between attempts
    FETCH_BACKOFF_MULTIPLIER: float = 1.0  # 1.0 keeps the delay fixed
    FETCH_MAX_DELAY_MS: Optional[int] = None
    FETCH_DEADLINE_SECONDS: Optional[float] = None  # Overall call deadline

    # === Failure Classification ===
    TRANSIENT_STATUS_CODES: list[int] = [408, 425, 429, 500, 502, 503, 504]

    # === Transport ===
    TRANSPORT_TIMEOUT: float = 30.0  # seconds, per attempt
    TRANSPORT_MAX_CONNECTIONS: int = 10
    TRANSPORT_MAX_KEEPALIVE: int = 5
    TRANSPORT_KEEPALIVE_EXPIRY: float = 30.0
    TRANSPORT_USER_AGENT: str = "resilient-fetch/0.1.0"

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
