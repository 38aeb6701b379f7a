"""Logging for the monitor: JSONL file for ingestion, short lines on the console."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict

LOG_FILE_NAME = "monitor_current.jsonl"
CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord, taken: Dict[str, Any]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for key, value in vars(record).items():
        if key.startswith("_") or key in _RESERVED_ATTRS or key in taken:
            continue
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            continue
        fields[key] = value
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per record: UTC timestamp, level, logger, message and ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload.update(_extra_fields(record, payload))
        return json.dumps(payload, ensure_ascii=False)


def _reset_handlers(logger: Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    *,
    log_dir: Path,
    level: str = "INFO",
    logger_name: str = "ticker_trend",
    console: bool = True,
) -> Logger:
    """Send ``logger_name`` to a midnight-rotated JSONL file in ``log_dir``.

    With ``console`` the same records are echoed to stderr as plain text.
    Calling this again replaces the handlers installed by a previous call.
    """

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME
    file_handler = TimedRotatingFileHandler(
        log_file,
        when="midnight",
        backupCount=14,
        encoding="utf-8",
        utc=True,
    )
    file_handler.setFormatter(JsonFormatter())

    logger = logging.getLogger(logger_name)
    logger.setLevel(level.upper())
    _reset_handlers(logger)
    logger.addHandler(file_handler)
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    logger.propagate = False
    logger.debug("JSON logging configured", extra={"log_file": str(log_file)})
    return logger


__all__ = ["CONSOLE_FORMAT", "JsonFormatter", "LOG_FILE_NAME", "configure_logging"]
