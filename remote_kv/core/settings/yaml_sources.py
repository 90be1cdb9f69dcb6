"""Custom YAML config source with conf.d directory support.

Extends pydantic-settings YamlConfigSettingsSource to support:
- Main YAML file (e.g., conf/storage.yaml)
- conf.d directory merging (e.g., conf/storage.d/*.yaml)
- Alphabetical file ordering in conf.d

YAML sits between init kwargs and environment variables in precedence.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic_settings import YamlConfigSettingsSource

if TYPE_CHECKING:
    from pydantic_settings import BaseSettings


class ConfDYamlConfigSettingsSource(YamlConfigSettingsSource):
    """YAML settings source with conf.d directory support.

    Supports the standard Linux conf.d pattern:
    - conf/app.yaml        (base configuration)
    - conf/app.d/*.yaml    (override files, merged alphabetically)

    Environment variable can override config directory:
    - APP_CONFIG_DIR=/custom/path
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: str = "app.yaml",
        confd_dir: str | None = "app.d",
        config_dir_env: str = "CONFIG_DIR",
        base_dir: str = "conf",
        yaml_file_encoding: str | None = "utf-8",
    ) -> None:
        """Initialize the conf.d YAML source.

        Args:
            settings_cls: The settings class being configured.
            yaml_file: Main YAML file name (e.g., "app.yaml").
            confd_dir: conf.d subdirectory name (e.g., "app.d"), or None to disable.
            config_dir_env: Environment variable to override base directory.
            base_dir: Default base directory for config files.
            yaml_file_encoding: File encoding for YAML files.
        """
        config_base = Path(os.getenv(config_dir_env, base_dir))

        yaml_files: list[Path] = []

        main_file = config_base / yaml_file
        if main_file.exists():
            yaml_files.append(main_file)

        # conf.d files sorted alphabetically for deterministic order
        if confd_dir:
            confd_path = config_base / confd_dir
            if confd_path.exists() and confd_path.is_dir():
                yaml_files.extend(sorted(confd_path.glob("*.yaml")))
                yaml_files.extend(sorted(confd_path.glob("*.yml")))

        self._yaml_files = yaml_files

        super().__init__(
            settings_cls=settings_cls,
            yaml_file=yaml_files if yaml_files else None,
            yaml_file_encoding=yaml_file_encoding,
        )

    def __repr__(self) -> str:
        """Return human-readable summary of configured YAML files."""
        files_str = ", ".join(str(f) for f in self._yaml_files)
        return f"{self.__class__.__name__}(yaml_files=[{files_str}])"


# ============================================================================
# Convenience factory functions for each settings domain
# ============================================================================


def create_app_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for AppSettings (conf/app.yaml, conf/app.d/)."""
    return ConfDYamlConfigSettingsSource(
        settings_cls,
        yaml_file="app.yaml",
        confd_dir="app.d",
        config_dir_env="APP_CONFIG_DIR",
    )


def create_auth_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for AuthSettings (conf/auth.yaml, conf/auth.d/)."""
    return ConfDYamlConfigSettingsSource(
        settings_cls,
        yaml_file="auth.yaml",
        confd_dir="auth.d",
        config_dir_env="AUTH_CONFIG_DIR",
    )


def create_storage_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for StorageSettings.

    Loads from:
    - conf/storage.yaml (base)
    - conf/storage.d/*.yaml (overrides)

    Override directory with: STORAGE_CONFIG_DIR=/custom/path
    """
    return ConfDYamlConfigSettingsSource(
        settings_cls,
        yaml_file="storage.yaml",
        confd_dir="storage.d",
        config_dir_env="STORAGE_CONFIG_DIR",
    )


def create_logging_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for LoggingSettings (conf/logging.yaml, conf/logging.d/)."""
    return ConfDYamlConfigSettingsSource(
        settings_cls,
        yaml_file="logging.yaml",
        confd_dir="logging.d",
        config_dir_env="LOG_CONFIG_DIR",
    )
