"""Unit tests for rowbind logging helpers."""

import json
import logging
import sys
from collections.abc import Iterator
from typing import Any

import pytest

from rowbind.logger import ROOT_LOGGER_NAME, JSONFormatter, get_logger, set_log_level


@pytest.fixture
def restore_level() -> Iterator[None]:
    """Restore the package logger level and formatter after a test."""
    previous = logging.getLogger(ROOT_LOGGER_NAME).level
    yield
    set_log_level(previous)


def _record(msg: str, *args: Any, exc_info: Any = None) -> logging.LogRecord:
    return logging.LogRecord(
        "rowbind.tests", logging.INFO, __file__, 1, msg, args, exc_info
    )


@pytest.mark.unit
class TestJSONFormatter:
    """Tests for newline-delimited JSON log output."""

    def test_format_should_emit_single_json_object(self) -> None:
        line = JSONFormatter().format(_record("converted row=%s", 3))

        payload = json.loads(line)
        assert "\n" not in line
        assert payload["message"] == "converted row=3"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "rowbind.tests"

    def test_format_should_include_exception(self) -> None:
        try:
            raise ValueError("bad cell")
        except ValueError:
            record = _record("failed", exc_info=sys.exc_info())

        payload = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad cell" in payload["exception"]


@pytest.mark.unit
class TestLoggers:
    """Tests for get_logger and set_log_level."""

    def test_module_loggers_should_share_package_handler(self) -> None:
        logger = get_logger("rowbind.tests.shared")
        package_logger = logging.getLogger(ROOT_LOGGER_NAME)

        assert logger.handlers == []
        assert logger.propagate is True
        assert len(package_logger.handlers) == 1
        assert package_logger.propagate is False

    @pytest.mark.usefixtures("restore_level")
    def test_set_log_level_should_apply_to_module_loggers(self) -> None:
        logger = get_logger("rowbind.tests.level")

        set_log_level("ERROR")

        assert logger.getEffectiveLevel() == logging.ERROR
        assert not logger.isEnabledFor(logging.WARNING)

    @pytest.mark.usefixtures("restore_level")
    def test_set_log_level_should_honor_json_format(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ROWBIND_LOG_FORMAT", "json")

        set_log_level("INFO")

        handler = logging.getLogger(ROOT_LOGGER_NAME).handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)
