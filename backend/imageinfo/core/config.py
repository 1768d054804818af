"""
Image Info Cache Configuration

Configuration management with environment variable support.
Implements secure defaults and validation for all settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )
    SERVICE_NAME: str = Field(
        default="image-info-cache", description="Service name reported by health"
    )
    SERVICE_VERSION: str = Field(default="0.1.0", description="Service version")

    # Cache configuration
    # A multiple of 3: most releases carry 3 images, so 30 covers 10 open releases.
    MAX_CACHED_IMAGES: int = Field(
        default=30, ge=1, le=10000, description="Maximum number of cached images"
    )
    CACHE_STORAGE_KEY: str = Field(
        default="ROpdebee_dimensions_cache",
        min_length=1,
        description="Storage key holding the serialized cache store",
    )
    STORAGE_BACKEND: str = Field(
        default="memory", description="Storage backend: memory or redis"
    )

    # Redis configuration
    REDIS_URL: Optional[str] = Field(
        default=None, description="Redis connection URL for the redis backend"
    )
    REDIS_SOCKET_TIMEOUT: float = Field(
        default=5.0, gt=0, le=60, description="Redis socket timeout in seconds"
    )

    # Fetch configuration
    FETCH_MAX_RETRIES: int = Field(
        default=5, ge=0, le=20, description="Retries after the first HEAD attempt"
    )
    FETCH_RETRY_MIN_DELAY_SECONDS: float = Field(
        default=1.0, ge=0, le=60, description="First retry delay, doubled per retry"
    )
    FETCH_RETRY_MAX_DELAY_SECONDS: float = Field(
        default=60.0, ge=0, le=3600, description="Upper bound for a retry delay"
    )
    FETCH_TIMEOUT_SECONDS: float = Field(
        default=30.0, gt=0, le=300, description="HTTP request timeout in seconds"
    )
    USER_AGENT: str = Field(
        default="image-info-cache/0.1.0", description="User-Agent for HEAD probes"
    )

    # Development and debugging
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of: {allowed}")
        return v

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v):
        """Validate storage backend name."""
        allowed = ["memory", "redis"]
        if v.lower() not in allowed:
            raise ValueError(f"STORAGE_BACKEND must be one of: {allowed}")
        return v.lower()

    @field_validator("REDIS_URL")
    @classmethod
    def validate_redis_url(cls, v):
        """Validate Redis URL format."""
        if v is not None and not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("REDIS_URL must be a redis:// or rediss:// URL")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def uses_redis(self) -> bool:
        return self.STORAGE_BACKEND == "redis"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Create global settings instance
settings = get_settings()
