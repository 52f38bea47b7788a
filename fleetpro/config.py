"""
Application Configuration

Centralized configuration management using Pydantic settings.
Loads from environment variables with fallback to .env file.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    get_settings() is cached, so tests must set environment variables
    before the first import of fleetpro (or call get_settings.cache_clear()).
    """

    # Database settings
    DATABASE_URL: str = "postgresql://localhost/fleetpro_dev"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 40

    # Security settings
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Redis for rate limiting
    REDIS_URL: str = "redis://localhost:6379/0"

    # Application settings
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Rate limiting (tenants may override per-minute and burst)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_BURST: int = 10

    # Invitations
    FRONTEND_URL: str = "http://localhost:3000"
    INVITATION_EXPIRE_DAYS: int = 7

    # Compliance dates within this window are flagged "due_soon"
    EXPIRY_WARNING_DAYS: int = 30

    # DVLA vehicle enquiry service
    DVLA_API_BASE_URL: str = "https://driver-vehicle-licensing.api.gov.uk"
    DVLA_VEHICLE_API_KEY: Optional[str] = None
    DVLA_API_KEY: Optional[str] = None
    DVLA_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def dvla_api_key(self) -> Optional[str]:
        """Vehicle-specific key wins over the general one."""
        return self.DVLA_VEHICLE_API_KEY or self.DVLA_API_KEY


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
