"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from remote_kv.core.settings.loader import get_storage_settings

    settings = get_storage_settings()  # First call: loads and validates
    settings = get_storage_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    clear_all_caches()

    Or build settings directly:
    settings = StorageSettings(bucket="test-bucket")
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .auth import AuthSettings
from .logs import LoggingSettings
from .storage import StorageSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()


@lru_cache(maxsize=1)
def get_storage_settings() -> StorageSettings:
    """Get cached storage settings.

    Raises:
        pydantic.ValidationError: If no bucket name is configured.
    """
    return StorageSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear every settings cache, including the unified settings.

    Useful in tests after changing environment variables.
    """
    from .unified import get_settings

    get_app_settings.cache_clear()
    get_auth_settings.cache_clear()
    get_storage_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_settings.cache_clear()
