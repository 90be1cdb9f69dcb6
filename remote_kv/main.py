"""Server entry point for remote-kv.

Loads configuration, fails fast when it is invalid and runs the FastAPI
application under uvicorn.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, NoReturn

from pydantic import ValidationError

if TYPE_CHECKING:
    from remote_kv.core.settings import Settings

logger = logging.getLogger(__name__)


def load_settings_or_exit() -> Settings:
    """Load unified settings, exiting with status 1 when they are invalid.

    A missing bucket name is the common case and is reported by name.
    """
    from remote_kv.core.settings import get_settings

    try:
        return get_settings()
    except ValidationError as e:
        missing_bucket = any(
            err.get("type") == "missing" and "bucket" in str(err.get("loc", ())).lower()
            for err in e.errors()
        )
        if missing_bucket:
            logger.error("BUCKET_NAME is required")
        else:
            logger.error("Invalid configuration", extra={"errors": e.errors(include_url=False)})
        sys.exit(1)


def run_server(
    host: str | None = None,
    port: int | None = None,
    reload: bool = False,
) -> NoReturn:
    """Run the FastAPI application server.

    Args:
        host: Bind host; defaults to ``APP_HOST``.
        port: Bind port; defaults to ``PORT``.
        reload: Restart on code changes (development only).
    """
    import uvicorn

    from remote_kv.app.main import create_app
    from remote_kv.infra.logging import setup_logging

    setup_logging()
    settings = load_settings_or_exit()

    host = host or settings.app.host
    port = port or settings.app.port

    logger.info("Listening", extra={"host": host, "port": port, "bucket": settings.storage.bucket})

    if reload:
        # Reload needs an import string; the factory reloads settings itself
        uvicorn.run(
            "remote_kv.app.main:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            log_config=None,
        )
    else:
        uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
    sys.exit(0)


def main() -> NoReturn:
    """Entry point for the ``remote-kv-server`` script."""
    run_server()


if __name__ == "__main__":
    main()
