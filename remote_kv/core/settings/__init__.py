"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app/auth/storage/logging), frozen after load
and cached by the loaders below.

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files (optional, local/dev)
    3. Environment variables (production)
    4. .env file (development only)
    5. secrets_dir (Kubernetes/Docker secrets)
"""

from __future__ import annotations

from .app import AppSettings
from .auth import AuthSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_auth_settings,
    get_logging_settings,
    get_storage_settings,
)
from .logs import LoggingSettings
from .storage import StorageBackendType, StorageSettings
from .unified import Settings, get_settings

__all__ = [
    "AppSettings",
    "AuthSettings",
    "LoggingSettings",
    "Settings",
    "StorageBackendType",
    "StorageSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_auth_settings",
    "get_logging_settings",
    "get_settings",
    "get_storage_settings",
]
