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


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration (hosted backend)
    # -------------------------------------------------------------------------
    # URL and anon key are required - nothing works without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (requests run under RLS)"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (bypasses RLS, diagnostics only)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret used to verify access tokens"
    )

    # -------------------------------------------------------------------------
    # Legacy REST API (fallback target)
    # -------------------------------------------------------------------------

    LEGACY_API_URL: str = Field(
        default="http://localhost:8080/api/v1",
        description="Base URL of the legacy REST API kept as a fallback"
    )

    LEGACY_API_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for legacy API requests"
    )

    EDGE_FUNCTION_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for Supabase Edge Function calls"
    )

    # -------------------------------------------------------------------------
    # Session token storage
    # -------------------------------------------------------------------------

    TOKEN_STORAGE_KEY: str = Field(
        default="r_to",
        description="Key under which the access token is stored"
    )

    TOKEN_STORE_PATH: str | None = Field(
        default=None,
        description="Optional JSON file used to persist stored tokens"
    )

    # -------------------------------------------------------------------------
    # Domain Settings
    # -------------------------------------------------------------------------

    APP_URL: str = Field(
        default="http://localhost:3000",
        description="Front-end origin used for password recovery redirects"
    )

    LOW_STOCK_THRESHOLD: int = Field(
        default=10,
        ge=0,
        description="Products at or below this quantity count as low stock"
    )

    COUNTER_UPDATE_MAX_RETRIES: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Attempts for compare-and-set counter updates"
    )

    SIGNED_URL_EXPIRES_IN: int = Field(
        default=3600,
        ge=60,
        description="Lifetime in seconds of signed download URLs"
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

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (production sets env vars directly)
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

        Example: "http://localhost:3000, https://relif.org" -> ["http://localhost:3000", "https://relif.org"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def jwks_url(self) -> str:
        """Where Supabase publishes the public keys for asymmetric JWTs."""
        return f"{self.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"

    @property
    def password_recovery_url(self) -> str:
        """Where password reset emails send the user."""
        return f"{self.APP_URL.rstrip('/')}/recover-password"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

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

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
