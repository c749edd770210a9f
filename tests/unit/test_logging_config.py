"""
Unit tests for logging setup.
"""

from __future__ import annotations

import logging

import pytest

from transactions_api.app.core.config import Settings
from transactions_api.app.core.logging_config import HANDLER_NAME, setup_logging


def own_handlers():
    return [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in own_handlers():
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


def test_console_handler_and_level():
    setup_logging(Settings(log_level="warning"))
    assert logging.getLogger().level == logging.WARNING
    assert [type(h) for h in own_handlers()] == [logging.StreamHandler]


def test_repeated_setup_does_not_duplicate_handlers():
    setup_logging(Settings())
    setup_logging(Settings())
    assert len(own_handlers()) == 1


def test_log_file(tmp_path):
    log_file = tmp_path / "api.log"
    setup_logging(Settings(log_level="INFO", log_file=str(log_file)))
    logging.getLogger("transactions_api.test").info("seed loaded")
    for handler in own_handlers():
        handler.flush()
    assert "[INFO] transactions_api.test: seed loaded" in log_file.read_text(encoding="utf-8")


def test_unknown_level_falls_back_to_info():
    setup_logging(Settings(log_level="chatty"))
    assert logging.getLogger().level == logging.INFO


def test_http_client_quiet_unless_debug():
    setup_logging(Settings(log_level="DEBUG"))
    assert logging.getLogger("httpx").level == logging.WARNING

    setup_logging(Settings(log_level="DEBUG", debug=True))
    assert logging.getLogger("httpx").level == logging.DEBUG


def test_server_loggers_propagate_to_root():
    setup_logging(Settings(log_level="INFO"))
    access = logging.getLogger("uvicorn.access")
    assert access.propagate is True
    assert access.handlers == []
    assert access.level == logging.INFO
