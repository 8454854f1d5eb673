"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Portfolio League"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "development", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # Snapshot history
    SNAPSHOT_MIN_INTERVAL_MINUTES: int = 5
    GROUP_SNAPSHOT_MIN_INTERVAL_SECONDS: int = 30
    SNAPSHOT_RETENTION_DAYS: int = 365
    GROUP_BUCKET_SECONDS: int = 60  # member snapshots summed per minute

    # Leaderboard & charts
    LEADERBOARD_TRADE_COUNT: int = 3
    TOP_HOLDINGS_COUNT: int = 10
    DEFAULT_TIMEFRAME: Literal["1D", "1W", "1M", "1Y", "YTD", "ALL"] = "1M"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]


# Global settings instance
settings = Settings()
