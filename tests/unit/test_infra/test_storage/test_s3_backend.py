"""Unit tests for the S3 backend with a mocked aiobotocore client."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

from botocore.exceptions import ClientError
import pytest

from remote_kv.core.settings.storage import StorageBackendType, StorageSettings
from remote_kv.infra.storage.backends.s3.backend import S3Backend
from remote_kv.infra.storage.exceptions import (
    StorageError,
    StorageFileNotFoundError,
    StorageNotConfiguredError,
)

SESSION_PATH = "remote_kv.infra.storage.backends.s3.backend.get_session"


def _client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def session(s3_client: AsyncMock):
    with patch(SESSION_PATH) as get_session_mock:
        client_ctx = MagicMock()
        client_ctx.__aenter__ = AsyncMock(return_value=s3_client)
        client_ctx.__aexit__ = AsyncMock(return_value=False)
        get_session_mock.return_value.create_client.return_value = client_ctx
        yield get_session_mock.return_value


@pytest.fixture
async def backend(session) -> S3Backend:
    settings = StorageSettings(
        backend=StorageBackendType.MINIO,
        bucket="kv-bucket",
        endpoint="http://localhost:9000",
        access_key="minio",
        secret_key="minio123",
        list_page_size=2,
    )
    backend = S3Backend(settings)
    await backend.startup()
    return backend


class TestLifecycle:
    async def test_startup_passes_endpoint_and_credentials(self, session, backend: S3Backend):
        args, kwargs = session.create_client.call_args
        assert args == ("s3",)
        assert kwargs["endpoint_url"] == "http://localhost:9000"
        assert kwargs["aws_access_key_id"] == "minio"
        assert backend.is_ready

    async def test_shutdown_exits_client_context(self, session, backend: S3Backend):
        await backend.shutdown()

        session.create_client.return_value.__aexit__.assert_awaited_once()
        assert not backend.is_ready

    async def test_operations_require_startup(self, session):
        backend = S3Backend(StorageSettings(backend="s3", bucket="b"))

        with pytest.raises(StorageNotConfiguredError):
            await backend.object_exists("a")

    async def test_health_check(self, s3_client: AsyncMock, backend: S3Backend):
        assert await backend.health_check() is True
        s3_client.head_bucket.assert_awaited_once_with(Bucket="kv-bucket")

        s3_client.head_bucket.side_effect = _client_error("403", "HeadBucket")
        assert await backend.health_check() is False


class TestObjects:
    async def test_upload(self, s3_client: AsyncMock, backend: S3Backend):
        s3_client.put_object.return_value = {"ETag": '"abc"'}

        result = await backend.upload_object(
            "kv/a", b"hello", content_type="text/plain", cache_control="no-store"
        )

        s3_client.put_object.assert_awaited_once_with(
            Bucket="kv-bucket",
            Key="kv/a",
            Body=b"hello",
            ContentType="text/plain",
            CacheControl="no-store",
        )
        assert result.etag == "abc"
        assert result.size_bytes == 5

    async def test_download(self, s3_client: AsyncMock, backend: S3Backend):
        body = MagicMock()
        body.read = AsyncMock(return_value=b"hello")
        s3_client.get_object.return_value = {"Body": body}

        assert await backend.download_object("kv/a") == b"hello"

    async def test_download_missing(self, s3_client: AsyncMock, backend: S3Backend):
        s3_client.get_object.side_effect = _client_error("NoSuchKey")

        with pytest.raises(StorageFileNotFoundError):
            await backend.download_object("kv/a")

    async def test_exists(self, s3_client: AsyncMock, backend: S3Backend):
        assert await backend.object_exists("kv/a") is True

        s3_client.head_object.side_effect = _client_error("404", "HeadObject")
        assert await backend.object_exists("kv/a") is False

    async def test_exists_other_errors_raise(self, s3_client: AsyncMock, backend: S3Backend):
        s3_client.head_object.side_effect = _client_error("InternalError", "HeadObject")

        with pytest.raises(StorageError):
            await backend.object_exists("kv/a")

    async def test_delete(self, s3_client: AsyncMock, backend: S3Backend):
        await backend.delete_object("kv/a")

        s3_client.delete_object.assert_awaited_once_with(Bucket="kv-bucket", Key="kv/a")


class TestListing:
    async def test_stream_drains_all_pages(self, s3_client: AsyncMock, backend: S3Backend):
        s3_client.list_objects_v2.side_effect = [
            {
                "Contents": [{"Key": "kv/a", "Size": 1}, {"Key": "kv/b", "Size": 1}],
                "IsTruncated": True,
                "NextContinuationToken": "t1",
            },
            {"Contents": [{"Key": "kv/c", "Size": 1}], "IsTruncated": False},
        ]

        names = [obj.key async for obj in backend.stream_objects("kv/")]

        assert names == ["kv/a", "kv/b", "kv/c"]
        second_call = s3_client.list_objects_v2.call_args_list[1]
        assert second_call.kwargs == {
            "Bucket": "kv-bucket",
            "Prefix": "kv/",
            "MaxKeys": 2,
            "ContinuationToken": "t1",
        }

    async def test_empty_listing(self, s3_client: AsyncMock, backend: S3Backend):
        s3_client.list_objects_v2.return_value = {"KeyCount": 0, "IsTruncated": False}

        objects, token = await backend.list_objects("missing/")

        assert objects == []
        assert token is None
