"""Server commands."""

import click

from remote_kv.cli.utils import info


@click.command(name="serve")
@click.option("--host", default=None, help="Host to bind (default: APP_HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Port to bind (default: PORT or 8080)")
@click.option(
    "--reload/--no-reload",
    default=False,
    help="Enable auto-reload on code changes",
)
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the HTTP gateway under uvicorn.

    Exits with status 1 when BUCKET_NAME is not configured.
    """
    from remote_kv.main import run_server

    info("Starting remote-kv server...")
    run_server(host=host, port=port, reload=reload)
