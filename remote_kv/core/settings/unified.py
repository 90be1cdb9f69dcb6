"""Unified settings composition.

Composes the domain settings into the single object handed to the app
factory and the CLI.

Usage:
    from remote_kv.core.settings import get_settings

    settings = get_settings()
    print(settings.app.port)
    print(settings.storage.bucket)

Each nested settings class still loads from its own environment prefix
(APP_, AUTH_, STORAGE_, LOG_) plus the bare PORT, BUCKET_NAME and KEY_PREFIX
variables.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .logs import LoggingSettings
from .storage import StorageSettings


class Settings(BaseSettings):
    """Unified settings composing all domain settings.

    Example:
        settings = Settings(storage=StorageSettings(bucket="kv"))
        assert settings.app.port == 8080
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get unified settings instance (cached).

    Raises:
        pydantic.ValidationError: If a domain fails validation, most often
            because no bucket name is configured.
    """
    return Settings()
