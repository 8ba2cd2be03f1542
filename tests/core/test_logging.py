"""Tests for courier.core.logging.

Covers: StructuredLogger, SmartFormatter, PlainFormatter, JsonFormatter,
Colors, delivery_id context var, get_logger(), set_log_level().
"""

import json
import logging
import sys
import uuid
from unittest.mock import patch

import pytest

from courier.core.logging import (
    Colors,
    JsonFormatter,
    MODULE_ABBREV,
    PlainFormatter,
    SmartFormatter,
    StructuredLogger,
    get_delivery_id,
    get_logger,
    reset_delivery_id,
    set_delivery_id,
    set_log_level,
)
from courier.core.logging.formatters import _module_display
from courier.core.logging.structured_logger import _loggers


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


def _make_record(name="channels.delivery.pipeline", level=logging.INFO, msg="hello", extra_data=None):
    logger = logging.getLogger(name)
    record = logger.makeRecord(name, level, "", 0, msg, (), None)
    record.extra_data = extra_data or {}
    return record


@pytest.fixture
def no_log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "missing"))


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------
class TestColors:
    def test_disabled_when_no_color_set(self):
        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            assert Colors.get("\033[31m") == ""

    def test_disabled_when_not_tty(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        with patch.object(sys.stdout, "isatty", return_value=False):
            assert Colors.get("\033[31m") == ""


# ---------------------------------------------------------------------------
# delivery_id context var
# ---------------------------------------------------------------------------
class TestDeliveryIdContextVar:
    def test_default_is_none(self):
        assert get_delivery_id() is None

    def test_set_and_reset(self):
        token = set_delivery_id("abc-123")
        try:
            assert get_delivery_id() == "abc-123"
        finally:
            reset_delivery_id(token)
        assert get_delivery_id() is None


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------
class TestModuleDisplay:
    def test_known_prefix(self):
        assert _module_display("channels.delivery.pipeline") == "CHN|pipeline"
        assert MODULE_ABBREV["core"] == "COR"

    def test_unknown_prefix(self):
        assert _module_display("widgets") == "WID"

    def test_long_submodule_truncated(self):
        assert _module_display("channels.delivery.text_splitter") == "CHN|text_spl…"


class TestSmartFormatter:
    def test_basic_format(self):
        output = SmartFormatter(use_colors=False).format(_make_record())
        assert "hello" in output
        assert "INFO" in output
        assert "CHN|pipeline" in output

    def test_extra_data(self):
        record = _make_record(extra_data={"units": 3, "destination": "42"})
        output = SmartFormatter(use_colors=False).format(record)
        assert "units=3" in output
        assert "destination=42" in output

    @pytest.mark.parametrize("value,expected", [
        (None, "null"),
        (True, "yes"),
        (False, "no"),
        (42, "42"),
        ([], "[]"),
        ([1, 2, 3], "[1, 2, 3]"),
        ([1, 2, 3, 4], "[4 items]"),
        ({"a": 1}, "{1 keys}"),
    ])
    def test_format_value(self, value, expected):
        assert SmartFormatter(use_colors=False)._format_value(value) == expected

    def test_long_string_truncated(self):
        result = SmartFormatter(use_colors=False)._format_value("x" * 100, max_len=60)
        assert len(result) == 60
        assert result.endswith("...")


class TestPlainFormatter:
    def test_delivery_id_prefix(self):
        token = set_delivery_id("deadbeefcafe")
        try:
            output = PlainFormatter().format(_make_record(extra_data={"parts": 4}))
        finally:
            reset_delivery_id(token)
        assert "[deadbeef│CHN|pipeline" in output
        assert "parts=4" in output

    def test_no_delivery_id(self):
        output = PlainFormatter().format(_make_record())
        assert "[CHN|pipeline" in output


class TestJsonFormatter:
    def test_payload(self):
        token = set_delivery_id("abc")
        try:
            output = JsonFormatter().format(_make_record(extra_data={"length": 20}))
        finally:
            reset_delivery_id(token)
        payload = json.loads(output)
        assert payload["msg"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["delivery"] == "abc"
        assert payload["length"] == 20


# ---------------------------------------------------------------------------
# StructuredLogger / get_logger
# ---------------------------------------------------------------------------
class TestStructuredLogger:
    def test_kwargs_become_extra_data(self, no_log_dir):
        sl = StructuredLogger(f"channels.test_{uuid.uuid4().hex[:6]}", level=logging.DEBUG)
        handler = _ListHandler()
        sl._logger.addHandler(handler)

        sl.info("Unit sent", unit="1/2", length=10)

        [record] = handler.records
        assert record.getMessage() == "Unit sent"
        assert record.extra_data == {"unit": "1/2", "length": 10}

    def test_below_level_is_dropped(self, no_log_dir):
        sl = StructuredLogger(f"channels.test_{uuid.uuid4().hex[:6]}", level=logging.WARNING)
        handler = _ListHandler()
        sl._logger.addHandler(handler)

        sl.debug("quiet")
        sl.warning("loud")

        assert [r.getMessage() for r in handler.records] == ["loud"]

    def test_file_handler_when_log_dir_exists(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_DIR", str(tmp_path))
        sl = StructuredLogger(f"core.test_{uuid.uuid4().hex[:6]}", level=logging.DEBUG)

        sl.warning("written to disk", error="boom")

        assert "written to disk" in (tmp_path / "courier.log").read_text(encoding="utf-8")
        for h in sl._logger.handlers:
            h.close()

    def test_does_not_propagate(self, no_log_dir):
        sl = StructuredLogger(f"core.test_{uuid.uuid4().hex[:6]}")
        assert sl._logger.propagate is False


class TestGetLogger:
    def test_cached(self):
        assert get_logger("channels.cache_test") is get_logger("channels.cache_test")
        assert "channels.cache_test" in _loggers

    def test_set_log_level(self):
        logger = get_logger("channels.level_test")
        original = logger._logger.level
        try:
            set_log_level("error")
            assert logger._logger.level == logging.ERROR
        finally:
            set_log_level(logging.getLevelName(original))
