"""Shared-secret authentication settings.

Environment variables use AUTH_ prefix, so the single field ``token`` is
read from ``AUTH_TOKEN``. An unset or empty token turns authentication off.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_auth_yaml_source


class AuthSettings(BaseSettings):
    """Bearer-token gate configuration."""

    token: SecretStr | None = Field(
        default=None,
        description="Static bearer token required on every non-health route. Empty disables auth.",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def enabled(self) -> bool:
        """Whether requests must present the bearer token."""
        return self.token is not None and self.token.get_secret_value() != ""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
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
            create_auth_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
