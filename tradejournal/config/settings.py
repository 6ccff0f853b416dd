"""
Application settings using Pydantic Settings.

Loads configuration from environment variables with validation.
"""

from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are loaded from .env file or environment variables.
    Uses Pydantic for validation and type checking.
    """

    # App Configuration
    APP_NAME: str = Field(default="Trade Journal API")
    APP_VERSION: str = Field(default="1.0.0")
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Database (transfers need a replica set for multi-document transactions)
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017/?replicaSet=rs0",
        description="MongoDB connection string"
    )
    MONGODB_DB_NAME: str = Field(default="trade_journal", description="MongoDB database name")

    # JWT Authentication (tokens are issued by the auth service)
    JWT_SECRET_KEY: str = Field(default="change-me", description="Secret key for JWT tokens")
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30)

    # Currency
    REPORTING_CURRENCY: str = Field(default="USD")
    EXCHANGE_RATE_API_URL: str = Field(default="https://api.exchangerate-api.com/v4/latest")
    EXCHANGE_RATE_TIMEOUT_SECONDS: float = Field(default=5.0)
    EXCHANGE_RATE_CACHE_TTL_SECONDS: int = Field(default=3600)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE_PATH: str = Field(default="logs/app.log")

    # CORS
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_comma_separated(cls, v) -> List[str]:
        """Parse list settings from comma-separated string or list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        elif isinstance(v, list):
            return v
        return []

    @field_validator("REPORTING_CURRENCY")
    @classmethod
    def normalize_reporting_currency(cls, v: str) -> str:
        """Currency codes are stored upper-case."""
        return v.strip().upper()

    @field_validator("EXCHANGE_RATE_TIMEOUT_SECONDS")
    @classmethod
    def validate_rate_timeout(cls, v: float) -> float:
        """Validate provider timeout is positive."""
        if v <= 0:
            raise ValueError("EXCHANGE_RATE_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("EXCHANGE_RATE_CACHE_TTL_SECONDS")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        """Validate cache staleness window is positive."""
        if v <= 0:
            raise ValueError("EXCHANGE_RATE_CACHE_TTL_SECONDS must be positive")
        return v

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES")
    @classmethod
    def validate_access_token_expire(cls, v: int) -> int:
        """Validate access token expiration is positive."""
        if v <= 0:
            raise ValueError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get settings instance (lazy loading)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()
