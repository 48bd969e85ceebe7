"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with validation.
"""
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    # Application
    APP_NAME: str = "Fatturazione"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"  # development, staging, production

    # Storage
    STORAGE_BACKEND: str = "memory"  # memory or mongodb
    MONGODB_URI: Optional[str] = None
    DB_NAME: str = "fatturazione"
    MONGODB_MAX_POOL_SIZE: int = 50
    MONGODB_MIN_POOL_SIZE: int = 5
    MONGODB_TIMEOUT_MS: int = 5000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    LOG_FILE: Optional[Path] = None

    # Fiscal rules
    # DPR 642/72 Art. 13: stamp duty above 77.47 EUR on VAT-exempt documents
    STAMP_DUTY_THRESHOLD: Decimal = Decimal("77.47")
    STAMP_DUTY_AMOUNT: Decimal = Decimal("2.00")
    DEFAULT_WITHHOLDING_PERCENTAGE: Decimal = Decimal("20")
    DEFAULT_DUE_DAYS: int = 30

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def uses_mongodb(self) -> bool:
        return self.STORAGE_BACKEND.lower() == "mongodb"


# Create singleton instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings singleton instance."""
    return settings
