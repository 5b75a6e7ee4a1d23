"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, link policy, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Storage
    STORE_BACKEND: Literal["mongo", "memory"] = Field(
        default="mongo",
        description="Link store implementation (mongo or in-memory)"
    )
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="sms_deeplink_api",
        description="MongoDB database name"
    )
    LINKS_COLLECTION: str = Field(
        default="links",
        description="Collection holding link records"
    )
    STORE_TIMEOUT_MS: int = Field(
        default=5000,
        description="Upper bound for a single store operation in milliseconds"
    )

    # Link policy
    MIN_PHONE_DIGITS: int = Field(
        default=10,
        description="Minimum number of digits in a normalized phone number"
    )
    SHORT_ID_BYTES: int = Field(
        default=6,
        description="Random bytes per generated short identifier"
    )
    MAX_ID_ATTEMPTS: int = Field(
        default=10,
        description="Maximum identifier generation attempts per link"
    )
    PUBLIC_BASE_URL: Optional[str] = Field(
        default=None,
        description="Externally visible base URL for short links (defaults to request host)"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("STORE_TIMEOUT_MS", "MIN_PHONE_DIGITS", "SHORT_ID_BYTES", "MAX_ID_ATTEMPTS")
    def validate_positive(cls, v):
        """Policy values must be positive."""
        if v < 1:
            raise ValueError("value must be a positive integer")
        return v

    @validator("PUBLIC_BASE_URL")
    def strip_base_url(cls, v):
        """Normalize the public base URL (no trailing slash)."""
        if v:
            return v.rstrip("/")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if settings.STORE_BACKEND == "mongo":
        if not settings.MONGODB_URL:
            errors.append("MONGODB_URL is required for the mongo store")
        if not settings.MONGODB_DB_NAME:
            errors.append("MONGODB_DB_NAME is required for the mongo store")

    # Production-specific validations
    if settings.is_production:
        if settings.STORE_BACKEND == "memory":
            errors.append("In-memory store is not allowed in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
