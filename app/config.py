# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

API_VERSION = "1.0.0"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPPLIERS_TABLE: str = Field(
        default="suppliers",
        description="Table that stores supplier registrations"
    )

    # -------------------------------------------------------------------------
    # Storage Buckets
    # -------------------------------------------------------------------------
    # All buckets are public; uploaded files are referenced by public URL

    LOGO_BUCKET: str = Field(
        default="supplier-logos",
        description="Bucket for supplier logos"
    )

    PRODUCTS_BUCKET: str = Field(
        default="supplier-products",
        description="Bucket for product images"
    )

    CATALOG_BUCKET: str = Field(
        default="supplier-catalogs",
        description="Bucket for uploaded product catalogs"
    )

    # -------------------------------------------------------------------------
    # Email (Resend)
    # -------------------------------------------------------------------------

    RESEND_API_KEY: str = Field(
        ...,
        description="Resend API key for transactional email"
    )

    RESEND_API_URL: str = Field(
        default="https://api.resend.com",
        description="Base URL of the Resend API"
    )

    EMAIL_FROM: str = Field(
        default="Hasapakia <onboarding@resend.dev>",
        description="Sender address for all outgoing email"
    )

    NOTIFY_RECIPIENTS: str = Field(
        default="",
        description="Internal recipients of new-supplier notices (comma-separated)"
    )

    EMAIL_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout for a single email send"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # "memory" keeps counters in this process only; use "redis" when running
    # more than one instance

    RATE_LIMIT_BACKEND: Literal["memory", "redis"] = Field(
        default="memory",
        description="Where submission counters are kept"
    )

    RATE_LIMIT_MAX_SUBMISSIONS: int = Field(
        default=3,
        ge=1,
        description="Submissions allowed per client within one window"
    )

    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=3600,
        ge=1,
        description="Length of the rate-limit window in seconds"
    )

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the shared rate-limit counter"
    )

    # -------------------------------------------------------------------------
    # Upload Limits
    # -------------------------------------------------------------------------

    MAX_FILE_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum decoded size of a single uploaded file in MB"
    )

    MAX_PRODUCT_IMAGES: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum number of product images per submission"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # The registration form is public, so any origin is allowed outside production
    CORS_ORIGINS: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def notify_recipients_list(self) -> list[str]:
        """Parse NOTIFY_RECIPIENTS into a list of addresses."""
        return [addr.strip() for addr in self.NOTIFY_RECIPIENTS.split(",") if addr.strip()]

    @property
    def max_file_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_FILE_SIZE_MB * 1024 * 1024

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
