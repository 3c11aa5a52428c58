"""
Configuration management.

Centralized environment variable management and validation.
"""

from functools import lru_cache
from typing import Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow case-insensitive env var matching
        extra="ignore"
    )

    # Supabase configuration (service role, used for pipeline/file writes and refunds)
    supabase_url: str
    supabase_service_key: str

    # Shared secret the n8n workers send with every status webhook
    webhook_secret: str
    webhook_secret_header: str = "x-api-key"

    # ElevenLabs voice catalog
    # Optional at startup: the voices endpoint reports a configuration error when missing
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_base_url: str = "https://api.elevenlabs.io"

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: str = "logs"

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Validate Supabase URL format."""
        if not v:
            raise ConfigError("SUPABASE_URL is required")
        if not v.startswith(("http://", "https://")):
            raise ConfigError("SUPABASE_URL must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")

    @field_validator("supabase_service_key")
    @classmethod
    def validate_supabase_service_key(cls, v: str) -> str:
        """Validate Supabase service key format."""
        if not v:
            raise ConfigError("SUPABASE_SERVICE_KEY is required")
        if len(v) < 20:  # Basic format check
            raise ConfigError("SUPABASE_SERVICE_KEY appears to be invalid")
        return v

    @field_validator("webhook_secret")
    @classmethod
    def validate_webhook_secret(cls, v: str) -> str:
        """Validate webhook secret strength."""
        if not v:
            raise ConfigError("WEBHOOK_SECRET is required")
        if len(v) < 16:
            raise ConfigError("WEBHOOK_SECRET must be at least 16 characters")
        return v

    @field_validator("webhook_secret_header")
    @classmethod
    def validate_webhook_secret_header(cls, v: str) -> str:
        """Header names are matched case-insensitively; store lowercase."""
        if not v or not v.strip():
            raise ConfigError("WEBHOOK_SECRET_HEADER must not be empty")
        return v.strip().lower()

    @field_validator("elevenlabs_api_key")
    @classmethod
    def validate_elevenlabs_api_key(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank key as not configured."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def cors_allow_headers(self) -> list[str]:
        """Headers accepted from browsers and workers, including the secret header."""
        headers = ["authorization", "x-client-info", "apikey", "content-type"]
        if self.webhook_secret_header not in headers:
            headers.append(self.webhook_secret_header)
        return headers


@lru_cache
def get_settings() -> Settings:
    """
    Resolve settings once per process.

    Returns:
        Cached Settings instance

    Raises:
        ConfigError: If environment is missing or invalid
    """
    try:
        return Settings()
    except ConfigError:
        raise
    except Exception as e:
        # Re-raise as ConfigError for consistency
        raise ConfigError(f"Failed to load configuration: {str(e)}") from e
