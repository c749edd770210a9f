"""
Main entrypoint for the Transactions API.

This module assembles the FastAPI application, sets up logging, CORS
and error handlers, and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Importing the app here
makes it easy to run with uvicorn or another ASGI server, e.g.::

    uvicorn transactions_api.app.main:app --reload

Settings are read from the environment once, by ``create_app``, and
stored on ``app.state`` together with the record store.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import router as v1_router
from .core.config import Settings
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.store import TransactionStore


def create_app(
    settings: Optional[Settings] = None,
    seed_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Read from the environment when omitted.
    seed_transport : Optional[httpx.AsyncBaseTransport]
        Transport used to download the seed dataset.  ``None`` uses the
        network; tests pass an ``httpx.MockTransport``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or Settings.from_env()

    # Logging first so that everything below can log.
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Creates the database file if needed and applies migrations.
        app.state.store.initialize()
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = TransactionStore(settings.database_url)
    app.state.seed_transport = seed_transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
