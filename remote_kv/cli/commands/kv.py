"""Key-value commands.

Run the same operations as the HTTP API directly against the configured
bucket, using the same namespace layout.

Examples:
    remote-kv kv set greeting hello --user alice
    remote-kv kv get greeting --user alice
    remote-kv kv list --prefix gr --user alice
    remote-kv kv delete greeting --user alice
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import json
import sys

import click

from remote_kv.cli.commands.storage import load_storage_settings
from remote_kv.cli.utils import coro, error, success
from remote_kv.core.exceptions import AppException, NotFoundException
from remote_kv.features.kv.schemas import KEY_REQUIRED_MESSAGE
from remote_kv.features.kv.service import KeyValueService
from remote_kv.infra.storage.backends import create_storage_backend

user_option = click.option("--user", default=None, help="Owner namespace")


def _require_key(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not value:
        raise click.BadParameter(KEY_REQUIRED_MESSAGE)
    return value


key_argument = click.argument("key", callback=_require_key)


@asynccontextmanager
async def kv_service() -> AsyncIterator[KeyValueService]:
    """Yield a service over a started backend, shutting it down afterwards."""
    settings = load_storage_settings()
    backend = create_storage_backend(settings)
    await backend.startup()
    try:
        yield KeyValueService(backend, key_prefix=settings.key_prefix)
    finally:
        await backend.shutdown()


@click.group(name="kv")
def kv() -> None:
    """Read and write keys in the configured bucket."""


@kv.command(name="get")
@key_argument
@user_option
@coro
async def get_cmd(key: str, user: str | None) -> None:
    """Print the value stored under KEY."""
    try:
        async with kv_service() as service:
            value = await service.get(key, user)
    except NotFoundException:
        error(f"Key '{key}' not found")
        sys.exit(1)
    except AppException as e:
        error(f"Failed to read '{key}': {e.detail or e.error}")
        sys.exit(1)

    click.echo(value)


@kv.command(name="set")
@key_argument
@click.argument("value")
@user_option
@coro
async def set_cmd(key: str, value: str, user: str | None) -> None:
    """Store VALUE under KEY, overwriting any previous value."""
    try:
        async with kv_service() as service:
            await service.set(key, value, user)
    except AppException as e:
        error(f"Failed to write '{key}': {e.detail or e.error}")
        sys.exit(1)

    success(f"Stored '{key}'")


@kv.command(name="delete")
@key_argument
@user_option
@coro
async def delete_cmd(key: str, user: str | None) -> None:
    """Delete KEY; deleting a missing key succeeds."""
    try:
        async with kv_service() as service:
            await service.delete(key, user)
    except AppException as e:
        error(f"Failed to delete '{key}': {e.detail or e.error}")
        sys.exit(1)

    success(f"Deleted '{key}'")


@kv.command(name="list")
@click.option("--prefix", default="", help="Only keys starting with this prefix")
@user_option
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array instead of lines")
@coro
async def list_cmd(prefix: str, user: str | None, as_json: bool) -> None:
    """List keys in the namespace."""
    try:
        async with kv_service() as service:
            keys = await service.list_keys(prefix, user)
    except AppException as e:
        error(f"Failed to list keys: {e.detail or e.error}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(keys))
        return
    for key in keys:
        click.echo(key)
