"""
Logging setup for the Transactions API.

``setup_logging`` installs one console handler (and, with ``LOG_FILE``,
one file handler) on the root logger, so application modules, uvicorn
and httpx all log in the same format.  The handlers it owns are
replaced on every call; handlers added by others (pytest, an embedding
server) are left alone.
"""

import logging
from pathlib import Path
from typing import List

from .config import Settings


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed by ``setup_logging``.
HANDLER_NAME = "transactions_api"

# Logged at WARNING unless DEBUG is on: one line per request to the seed URL.
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")

# uvicorn configures its own handlers unless started with ``log_config=None``
# (see ``run.py``); these propagate to the root handlers instead.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _build_handlers(settings: Settings) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(Path(settings.log_file).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings) -> None:
    """Configure logging from ``settings.log_level`` and ``settings.log_file``.

    Unknown level names fall back to ``INFO``.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(handler)
        handler.close()
    for handler in _build_handlers(settings):
        root.addHandler(handler)
    root.setLevel(level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(level)

    client_level = logging.DEBUG if settings.debug else max(level, logging.WARNING)
    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)
