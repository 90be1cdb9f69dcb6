"""Application settings for FastAPI configuration."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_app_yaml_source

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """FastAPI application settings.

    Environment variables use APP_ prefix.
    Example: APP_DEBUG=true, APP_MAX_BODY_BYTES=2097152

    The listen port is also read from the bare ``PORT`` variable, which is
    what most container platforms inject.
    """

    # Service identity
    service_name: str = Field(
        default="remote-kv",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Service name for logging (lowercase, hyphens allowed)",
    )
    title: str = Field(
        default="Remote KV Gateway",
        min_length=1,
        max_length=200,
        description="API title displayed in documentation",
    )
    description: str = Field(
        default="Key-value HTTP interface backed by an object-storage bucket",
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

    # FastAPI toggles
    debug: bool = Field(default=False, description="Enable debug mode")
    docs_url: str | None = Field(default="/docs", description="Swagger UI path")
    redoc_url: str | None = Field(default="/redoc", description="ReDoc path")
    openapi_url: str | None = Field(default="/openapi.json", description="OpenAPI schema path")
    disable_docs: bool = Field(default=False, description="Disable all API documentation")

    # Server configuration
    host: str = Field(
        default="0.0.0.0", min_length=1, max_length=255, description="Server bind host",
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "APP_PORT", "port"),
        description="Server port",
    )

    # CORS configuration
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins (JSON array)",
    )
    cors_allow_credentials: bool = Field(default=False, description="Allow credentials")
    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["*"], description="Allowed HTTP methods",
    )
    cors_allow_headers: list[str] = Field(
        default_factory=lambda: ["*"], description="Allowed headers",
    )
    cors_max_age: int = Field(
        default=3600,
        ge=0,
        le=86400,
        description="CORS preflight cache max-age in seconds (0-86400)",
    )

    # Request body limit
    max_body_bytes: int = Field(
        default=1024 * 1024,  # 1MB
        ge=1024,
        le=100 * 1024 * 1024,
        description="Maximum request body size in bytes; larger bodies get 413",
    )

    @model_validator(mode="after")
    def validate_production_settings(self) -> AppSettings:
        """Validate settings for production environment."""
        if self.environment == "production" and self.debug:
            msg = "Debug mode cannot be enabled in production environment"
            raise ValueError(msg)
        return self

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,  # Immutable settings
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,  # Ignore empty string env vars
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_app_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    def get_docs_url(self) -> str | None:
        """Get docs URL or None if disabled."""
        return None if self.disable_docs else self.docs_url

    def get_redoc_url(self) -> str | None:
        """Get ReDoc URL or None if disabled."""
        return None if self.disable_docs else self.redoc_url

    def get_openapi_url(self) -> str | None:
        """Get OpenAPI schema URL or None if disabled."""
        return None if self.disable_docs else self.openapi_url
