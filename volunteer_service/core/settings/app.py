"""Application settings for FastAPI configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """FastAPI application settings.

    Environment variables use APP_ prefix.
    Example: APP_DEBUG=true, APP_TITLE="Volunteer Service API"
    """

    # Service identity
    service_name: str = Field(
        default="volunteer-service",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Service name for logging/metrics (lowercase, hyphens allowed)",
    )
    title: str = Field(
        default="Volunteer Service API",
        min_length=1,
        max_length=200,
        description="API title displayed in documentation",
    )
    description: str = Field(
        default="Volunteer registration and administration for the charity platform",
        description="API description (supports Markdown)",
    )
    version: str = Field(
        default="1.0.0",
        min_length=1,
        max_length=50,
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$",
        description="API version (semver format)",
    )
    environment: Environment = Field(
        default="development", description="Environment: development|staging|production|test",
    )
    api_prefix: str = Field(
        default="/api/v1",
        min_length=1,
        max_length=255,
        pattern=r"^/.*$",
        description="Base URL prefix for API routes (e.g., /api/v1)",
    )

    # FastAPI toggles
    debug: bool = Field(default=False, description="Enable debug mode")
    docs_url: str | None = Field(default="/docs", description="Swagger UI path")
    redoc_url: str | None = Field(default="/redoc", description="ReDoc path")
    openapi_url: str | None = Field(default="/openapi.json", description="OpenAPI schema path")
    disable_docs: bool = Field(default=False, description="Disable all API documentation")
    root_path: str = Field(
        default="",
        description="Root path for proxy/ingress (set when behind a reverse proxy)",
    )

    # CORS (the public registration form is served from another origin)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins (JSON array)",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Bind host for the ASGI server")  # noqa: S104
    port: int = Field(default=8003, ge=1, le=65535, description="Bind port for the ASGI server")

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def docs_enabled(self) -> bool:
        """Whether interactive documentation is served."""
        return not self.disable_docs

    def get_docs_url(self) -> str | None:
        """Swagger UI URL, or None when docs are disabled."""
        return self.docs_url if self.docs_enabled else None

    def get_redoc_url(self) -> str | None:
        """ReDoc URL, or None when docs are disabled."""
        return self.redoc_url if self.docs_enabled else None

    def get_openapi_url(self) -> str | None:
        """OpenAPI schema URL, or None when docs are disabled."""
        return self.openapi_url if self.docs_enabled else None
