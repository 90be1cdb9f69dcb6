"""Unit tests for modular Pydantic Settings v2."""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError
import pytest

from remote_kv.core.settings import (
    AppSettings,
    AuthSettings,
    LoggingSettings,
    Settings,
    StorageBackendType,
    StorageSettings,
    clear_all_caches,
    get_settings,
    get_storage_settings,
)


@pytest.mark.unit
class TestAppSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("APP_PORT", raising=False)

        settings = AppSettings()

        assert settings.port == 8080
        assert settings.host == "0.0.0.0"
        assert settings.max_body_bytes == 1024 * 1024
        assert settings.cors_origins == ["*"]

    def test_bare_port_variable(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PORT", "9090")

        assert AppSettings().port == 9090

    def test_invalid_port(self):
        with pytest.raises(ValidationError):
            AppSettings(port=70000)

    def test_frozen(self):
        settings = AppSettings()

        with pytest.raises(ValidationError):
            settings.debug = True

    def test_debug_forbidden_in_production(self):
        with pytest.raises(ValidationError):
            AppSettings(environment="production", debug=True)

    def test_disable_docs(self):
        settings = AppSettings(disable_docs=True)

        assert settings.get_docs_url() is None
        assert settings.get_redoc_url() is None
        assert settings.get_openapi_url() is None


@pytest.mark.unit
class TestAuthSettings:
    def test_disabled_without_token(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("AUTH_TOKEN", raising=False)

        assert AuthSettings().enabled is False

    def test_enabled_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("AUTH_TOKEN", "abc")

        settings = AuthSettings()

        assert settings.enabled is True
        assert settings.token.get_secret_value() == "abc"

    def test_empty_token_disables_auth(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("AUTH_TOKEN", "")

        assert AuthSettings().enabled is False

    def test_token_not_leaked_in_repr(self):
        assert "abc" not in repr(AuthSettings(token="abc"))


@pytest.mark.unit
class TestStorageSettings:
    def test_bucket_from_bare_variable(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BUCKET_NAME", "kv-bucket")
        monkeypatch.setenv("KEY_PREFIX", "kv/")

        settings = StorageSettings()

        assert settings.bucket == "kv-bucket"
        assert settings.key_prefix == "kv/"
        assert settings.backend is StorageBackendType.GCS

    def test_missing_bucket_fails(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("BUCKET_NAME", raising=False)
        monkeypatch.delenv("STORAGE_BUCKET", raising=False)

        with pytest.raises(ValidationError):
            StorageSettings()

    def test_empty_bucket_fails(self):
        with pytest.raises(ValidationError):
            StorageSettings(bucket="")

    def test_credentials_must_come_in_pairs(self):
        with pytest.raises(ValidationError):
            StorageSettings(bucket="b", access_key="only-key")

    def test_boto3_config_with_endpoint_and_credentials(self):
        settings = StorageSettings(
            bucket="b",
            backend=StorageBackendType.MINIO,
            endpoint="http://localhost:9000",
            access_key="minio",
            secret_key="minio123",
            use_ssl=False,
        )

        config = settings.get_boto3_config()

        assert config["endpoint_url"] == "http://localhost:9000"
        assert config["aws_access_key_id"] == "minio"
        assert config["aws_secret_access_key"] == "minio123"
        assert config["use_ssl"] is False
        assert settings.is_emulator is True

    def test_boto3_config_without_credentials_uses_default_chain(self):
        config = StorageSettings(bucket="b", backend="s3").get_boto3_config()

        assert "aws_access_key_id" not in config
        assert "endpoint_url" not in config

    def test_describe_hides_secrets(self):
        settings = StorageSettings(bucket="b", access_key="AKIA", secret_key="shh")

        described = settings.describe()

        assert described["bucket"] == "b"
        assert described["static_credentials"] is True
        assert "shh" not in str(described)
        assert "AKIA" not in str(described)


@pytest.mark.unit
class TestLoggingSettings:
    def test_level_normalized(self):
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_file_path_only_when_enabled(self, tmp_path: Path):
        path = tmp_path / "kv.log"

        assert LoggingSettings(file_path=path).effective_file_path is None
        assert LoggingSettings(file_path=path, file_enabled=True).effective_file_path == path

    def test_logging_kwargs(self):
        kwargs = LoggingSettings(level="WARNING", json_logs=False).to_logging_kwargs()

        assert kwargs["log_level"] == "WARNING"
        assert kwargs["json_logs"] is False
        assert kwargs["file_path"] is None


@pytest.mark.unit
class TestUnifiedSettings:
    def test_loads_all_domains(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BUCKET_NAME", "unified-bucket")
        monkeypatch.setenv("AUTH_TOKEN", "t")

        settings = get_settings()

        assert isinstance(settings, Settings)
        assert settings.storage.bucket == "unified-bucket"
        assert settings.auth.enabled is True

    def test_cached_until_cleared(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BUCKET_NAME", "first")
        first = get_storage_settings()
        monkeypatch.setenv("BUCKET_NAME", "second")

        assert get_storage_settings() is first

        clear_all_caches()
        assert get_storage_settings().bucket == "second"


@pytest.mark.unit
class TestYamlSources:
    def test_conf_d_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        conf = tmp_path / "conf"
        (conf / "storage.d").mkdir(parents=True)
        (conf / "storage.yaml").write_text("bucket: from-yaml\nkey_prefix: base/\n")
        (conf / "storage.d" / "10-local.yaml").write_text("key_prefix: local/\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("BUCKET_NAME", raising=False)

        settings = StorageSettings()

        assert settings.bucket == "from-yaml"
        assert settings.key_prefix == "local/"
