"""
Configuration settings for POS Reviews API Service.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "POS Reviews API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./pos_reviews.db"

    # Approval Configuration
    approval_min_count: int = Field(default=3, ge=1)  # Approvals before a review is trusted

    allowed_origins: str = "http://localhost:8000,http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "POSR_"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
