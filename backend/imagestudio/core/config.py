"""
Application configuration using Pydantic Settings.

Supports hierarchical environment configuration:
- .env.base: Common non-secret defaults (committed to git)
- .env.{ENVIRONMENT}: Environment-specific overrides (gitignored)
- Environment variables: Highest priority
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get environment from env var, default to development
ENV = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    """Application settings with hierarchical env file support."""

    model_config = SettingsConfigDict(
        # Load base first, then environment-specific override
        env_file=[
            ".env.base",  # Common defaults (committed)
            f".env.{ENV}",  # Environment overrides (gitignored)
        ],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "test", "production"] = "development"

    # Database connection
    mongodb_url: str = "mongodb://localhost:27017/image_studio"
    redis_url: str = "redis://localhost:6379"

    # Security
    secret_key: str = "dev-secret-key-change-in-production"
    admin_secret: str = "dev-admin-secret-change-in-production"  # Service-to-service
    admin_emails: list[str] = []  # Accounts allowed to manage styles
    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    access_token_expire_days: int = 30

    # AI backend (enhance / generate / upscale)
    ai_backend_url: str = "http://127.0.0.1:5001"
    ai_backend_secret: str = ""  # Empty = no X-AI-Backend-Secret header
    ai_backend_timeout_seconds: float = 120.0

    # Auto-upscale loop after enhance (thresholds tuned empirically, keep as-is)
    ai_auto_upscale: bool = False
    upscale_min_dimension: int = 2048  # Shortest side in pixels
    upscale_min_bytes: int = 2_000_000  # Decoded payload size
    upscale_max_dimension: int = 4096  # Stop growing beyond this shortest side
    upscale_max_attempts: int = 3

    # Model-run provider (style transfer)
    replicate_api_token: str = ""
    replicate_base_url: str = "https://api.replicate.com/v1"
    replicate_model_standard: str = "google/nano-banana"  # model1
    replicate_model_pro: str = "google/nano-banana-pro"  # model2
    replicate_timeout_seconds: float = 300.0
    replicate_poll_interval_seconds: float = 1.0

    # Payment gateway
    paystack_secret_key: str = ""
    paystack_base_url: str = "https://api.paystack.co"
    app_url: str = ""  # Used to build the checkout callback URL

    # Style listing cache (Redis)
    styles_cache_ttl_seconds: int = 60

    # Rate limiting
    rate_limit_default: str = "200/minute"
    rate_limit_storage_uri: str = "memory://"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
