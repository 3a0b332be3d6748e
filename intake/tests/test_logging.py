from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from core.config import LoggingConfig
from core.logging import JsonFormatter, configure_logging, resolve_level


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield root
    for handler in [handler for handler in root.handlers if handler not in before]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


def test_json_formatter_copies_request_context() -> None:
    record = logging.LogRecord(
        "services.backend_client", logging.WARNING, __file__, 1, "rejected %s", ("POST",), None
    )
    record.backend_path = "/usuarios"
    record.status = 409

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "rejected POST"
    assert payload["level"] == "WARNING"
    assert payload["backend_path"] == "/usuarios"
    assert payload["status"] == 409
    assert "session" not in payload


def test_resolve_level_falls_back_to_info() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("nonsense") == logging.INFO


def test_configure_logging_writes_rotating_file(tmp_path: Path, restore_root_logger) -> None:
    config = LoggingConfig(level="WARNING", directory=str(tmp_path / "logs"), file_name="intake.log")

    configure_logging(config)

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert any(isinstance(handler, RotatingFileHandler) for handler in root.handlers)
    assert logging.getLogger("uvicorn").propagate is True
    assert logging.getLogger("aiohttp").level == logging.WARNING

    logging.getLogger("intake.test").warning("hola")
    for handler in root.handlers:
        handler.flush()
    assert "hola" in (tmp_path / "logs" / "intake.log").read_text(encoding="utf-8")
