"""Tests for propensity_engine.utils.logging."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from propensity_engine.config import LoggingConfig
from propensity_engine.utils.logging import _JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord("propensity_engine.test", logging.INFO, __file__, 1, "scored %d", (3,), None)
    record.run_slug = "abc"
    payload = json.loads(_JsonFormatter().format(record))
    assert payload["msg"] == "scored 3"
    assert payload["level"] == "INFO"
    assert payload["run_slug"] == "abc"


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "engine.log"
    configure_logging(LoggingConfig(level="DEBUG", log_file=str(log_file), json_format=True))

    logging.getLogger("propensity_engine.test").debug("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()

    line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
    assert json.loads(line)["msg"] == "hello"
    assert logging.getLogger("httpx").level == logging.WARNING


def test_console_logs_go_to_stderr(capsys) -> None:
    configure_logging(LoggingConfig(level="INFO"))

    logging.getLogger("propensity_engine.test").info("committed")

    captured = capsys.readouterr()
    assert "committed" in captured.err
    assert "committed" not in captured.out
