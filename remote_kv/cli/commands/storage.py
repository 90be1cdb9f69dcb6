"""Storage backend inspection commands.

- ``storage info`` prints the effective configuration without secrets
- ``storage check`` connects to the bucket and runs the backend health check
"""

import sys

import click
from pydantic import ValidationError

from remote_kv.cli.utils import coro, error, info, success, warning
from remote_kv.core.settings import get_storage_settings
from remote_kv.core.settings.storage import StorageSettings
from remote_kv.infra.storage.backends import create_storage_backend
from remote_kv.infra.storage.exceptions import StorageError


def load_storage_settings() -> StorageSettings:
    """Load storage settings or exit with status 1."""
    try:
        return get_storage_settings()
    except ValidationError as e:
        error(f"Invalid storage configuration: {e.error_count()} error(s)")
        for err in e.errors(include_url=False):
            loc = ".".join(str(part) for part in err["loc"])
            click.echo(f"  {loc}: {err['msg']}", err=True)
        sys.exit(1)


@click.group(name="storage")
def storage() -> None:
    """Storage backend commands."""


@storage.command(name="info")
def info_cmd() -> None:
    """Show the effective storage configuration."""
    settings = load_storage_settings()

    click.echo("=" * 60)
    click.secho("Storage Configuration", fg="cyan", bold=True)
    click.echo("=" * 60)
    for name, value in settings.describe().items():
        click.echo(f"{name}: {'-' if value is None else value}")

    if not settings.key_prefix:
        warning("KEY_PREFIX is empty, keys share the bucket root")


@storage.command(name="check")
@coro
async def check() -> None:
    """Connect to the bucket and run the backend health check."""
    settings = load_storage_settings()
    backend = create_storage_backend(settings)

    info(f"Checking {backend.backend_name} bucket '{settings.bucket}'...")
    try:
        await backend.startup()
        healthy = await backend.health_check()
    except StorageError as e:
        error(f"Storage startup failed: {e.message}")
        sys.exit(1)
    finally:
        await backend.shutdown()

    if not healthy:
        error(f"Bucket '{settings.bucket}' is not reachable")
        sys.exit(1)

    success(f"Bucket '{settings.bucket}' is reachable")
