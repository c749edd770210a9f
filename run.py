"""Entry point for the Transactions API.

This script serves the FastAPI application with Uvicorn.  It is
intended to be executed from the project root, for example under
Docker, where you only specify a single Python file to run.

Configuration such as DATABASE_URL, SEED_URL, HOST and PORT is read
from the environment (see ``transactions_api/app/core/config.py`` for
the full list).

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from transactions_api.app.main import app


async def run_api() -> None:
    """Start the API server using Uvicorn.

    Serves the application built at import time by ``main``, using its
    settings for host and port (``HOST`` and ``PORT``, defaulting to
    ``0.0.0.0`` and ``5000``).  ``log_config=None`` leaves logging to
    ``setup_logging``.
    """
    settings = app.state.settings
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_config=None,
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    await run_api()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
