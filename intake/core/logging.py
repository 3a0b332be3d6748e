from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from core.config import LoggingConfig

# Request context attached with ``extra=`` by the web layer and the backend client.
CONTEXT_FIELDS = ("session", "status", "backend_path")

_PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_PLAIN_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Library loggers that would otherwise flood the intake log.
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "aiohttp": logging.WARNING,
    "multipart": logging.INFO,
}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with any request context copied in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler(config: LoggingConfig) -> RotatingFileHandler:
    log_dir = Path(config.directory)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=log_dir / config.file_name,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt=_PLAIN_FORMAT, datefmt=_PLAIN_DATEFMT))
    return handler


def _console_handler(config: LoggingConfig) -> logging.Handler:
    handler = logging.StreamHandler()
    if config.json_console:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=_PLAIN_FORMAT, datefmt=_PLAIN_DATEFMT))
    return handler


def configure_logging(config: LoggingConfig) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_level(config.level))
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(config))
    root_logger.addHandler(_file_handler(config))

    # uvicorn ships its own handlers; its records go through the root logger instead.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
