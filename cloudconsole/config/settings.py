"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with defaults that
work against a local emulator out of the box. Using Pydantic's
BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock mode swaps the emulator for an in-memory backend.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Cloud Console API"
    host: str = Field(
        default="0.0.0.0",
        description="Interface the development server binds to"
    )
    port: int = Field(
        default=3000,
        description="Port the development server listens on"
    )

    # Backend (emulator) Configuration
    aws_access_key_id: str = Field(
        default="test",
        description="Access key. Emulators accept any value, so 'test' is the placeholder."
    )
    aws_secret_access_key: str = Field(
        default="test",
        description="Secret key. Emulators accept any value, so 'test' is the placeholder."
    )
    aws_endpoint: str = Field(
        default="http://192.168.0.108:4566",
        description="Emulator endpoint URL shared by every service client"
    )
    aws_region: str = Field(
        default="us-east-1",
        description="Region reported to the emulator"
    )
    localstack_auth_token: Optional[str] = Field(
        default=None,
        description="Emulator auth token. Logged (masked) at startup, not used by any route."
    )
    backend_mock_mode: bool = Field(
        default=False,
        description="Use in-memory backend instead of the emulator. Enables local dev without LocalStack."
    )
    backend_connect_timeout: Optional[float] = Field(
        default=None,
        description="Connect timeout in seconds for backend calls. None keeps botocore's default."
    )
    backend_read_timeout: Optional[float] = Field(
        default=None,
        description="Read timeout in seconds for backend calls. None keeps botocore's default."
    )

    # Application Behavior
    max_upload_size_bytes: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum size of a single uploaded file (5 MiB)."
    )
    static_dir: str = Field(
        default="public",
        description="Directory served at / for the browser console"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def masked_auth_token(self) -> Optional[str]:
        """Auth token with everything but the first four characters hidden."""
        if not self.localstack_auth_token:
            return None
        return self.localstack_auth_token[:4] + "****"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    This is safe because settings don't change during runtime.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
