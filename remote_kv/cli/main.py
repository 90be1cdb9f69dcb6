"""Main CLI entry point for remote-kv management commands."""

import click

from remote_kv.cli.commands import kv, server, storage
from remote_kv.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="1.0.0", prog_name="remote-kv")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """remote-kv - key-value gateway over an object-storage bucket.

    \b
    Commands:
      serve      Run the HTTP gateway
      storage    Inspect and check the configured bucket
      kv         Read and write keys directly

    \b
    Quick Start:
      BUCKET_NAME=my-bucket remote-kv storage check
      BUCKET_NAME=my-bucket remote-kv serve --port 8080
    """
    ctx.ensure_object(dict)


cli.add_command(server.serve)
cli.add_command(storage.storage)
cli.add_command(kv.kv)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
