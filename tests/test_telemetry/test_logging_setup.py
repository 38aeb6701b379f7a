from __future__ import annotations

import json
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from ticker_trend.telemetry.logging_setup import LOG_FILE_NAME, JsonFormatter, configure_logging


def test_json_formatter_should_include_extra_fields() -> None:
    record = logging.LogRecord("ticker_trend", logging.INFO, __file__, 10, "Trend %s", ("changed",), None)
    record.symbol = "BTC"
    record.unserializable = object()
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "Trend changed"
    assert payload["level"] == "INFO"
    assert payload["symbol"] == "BTC"
    assert "unserializable" not in payload
    assert "lineno" not in payload


def test_configure_logging_should_write_jsonl_file(tmp_path) -> None:
    logger = configure_logging(log_dir=tmp_path / "logs", level="debug", logger_name="ticker_trend.tests.setup")
    logger.info("Cycle complete", extra={"trends": {"BTC": "neutral"}})
    for handler in logger.handlers:
        handler.flush()
    lines = (tmp_path / "logs" / "monitor_current.jsonl").read_text(encoding="utf-8").splitlines()
    last = json.loads(lines[-1])
    assert last["message"] == "Cycle complete"
    assert last["trends"] == {"BTC": "neutral"}
    assert logger.propagate is False
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


def test_configure_logging_should_replace_previous_handlers(tmp_path) -> None:
    name = "ticker_trend.tests.reconfigure"
    first = configure_logging(log_dir=tmp_path / "a", logger_name=name)
    assert len(first.handlers) == 2
    assert isinstance(first.handlers[1].formatter, logging.Formatter)
    assert not isinstance(first.handlers[1].formatter, JsonFormatter)

    second = configure_logging(log_dir=tmp_path / "b", logger_name=name, console=False)
    assert second is first
    assert len(second.handlers) == 1
    assert isinstance(second.handlers[0], TimedRotatingFileHandler)
    assert Path(second.handlers[0].baseFilename) == tmp_path / "b" / LOG_FILE_NAME
    for handler in list(second.handlers):
        handler.close()
    second.handlers.clear()
