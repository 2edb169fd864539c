"""Tests for JSON log formatter.

Tests verify that logs are formatted correctly with:
- Required schema fields (timestamp, level, service, session_id, message)
- Optional context fields
- Exception information
"""

import json
import logging
import sys
from datetime import UTC, datetime

import pytest

from libs.common.logging.formatter import JSONFormatter


def _record(msg: str = "Test", level: int = logging.INFO, args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="libs.order_input.quote_refresh",
        level=level,
        pathname="/path/to/quote_refresh.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    @pytest.fixture
    def formatter(self) -> JSONFormatter:
        return JSONFormatter(service_name="dex_console")

    def test_basic_log_format(self, formatter: JSONFormatter) -> None:
        record = _record("Dropping stale quote")
        record.session_id = "session-123"

        log_dict = json.loads(formatter.format(record))

        assert log_dict["level"] == "INFO"
        assert log_dict["service"] == "dex_console"
        assert log_dict["logger"] == "libs.order_input.quote_refresh"
        assert log_dict["session_id"] == "session-123"
        assert log_dict["message"] == "Dropping stale quote"

    def test_timestamp_format(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record()))

        timestamp = log_dict["timestamp"]
        assert timestamp.endswith("Z")
        dt = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        assert dt.tzinfo == UTC

    def test_missing_session_id(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record()))

        assert log_dict["session_id"] is None

    def test_context_inclusion(self, formatter: JSONFormatter) -> None:
        record = _record()
        record.context = {"pair_address": "component_pair", "side": "BUY"}

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"] == {"pair_address": "component_pair", "side": "BUY"}

    def test_extra_fields_as_context(self, formatter: JSONFormatter) -> None:
        record = _record()
        record.pair_address = "component_pair"
        record.error = "timeout"

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"] == {"pair_address": "component_pair", "error": "timeout"}

    def test_no_context_when_disabled(self) -> None:
        formatter = JSONFormatter(service_name="dex_console", include_context=False)
        record = _record()
        record.context = {"pair_address": "component_pair"}

        log_dict = json.loads(formatter.format(record))

        assert "context" not in log_dict

    def test_decimal_context_is_serialized(self, formatter: JSONFormatter) -> None:
        from decimal import Decimal

        record = _record()
        record.context = {"amount": Decimal("12.5")}

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"]["amount"] == "12.5"

    def test_exception_logging(self, formatter: JSONFormatter) -> None:
        try:
            raise ValueError("Malformed quote payload")
        except ValueError:
            record = logging.LogRecord(
                name="test",
                level=logging.WARNING,
                pathname="/path/to/file.py",
                lineno=42,
                msg="Quote fetch failed",
                args=(),
                exc_info=sys.exc_info(),
            )

        log_dict = json.loads(formatter.format(record))

        assert log_dict["exception"]["type"] == "ValueError"
        assert log_dict["exception"]["message"] == "Malformed quote payload"
        assert "Traceback" in log_dict["exception"]["traceback"]

    def test_message_with_args(self, formatter: JSONFormatter) -> None:
        record = _record("Quote for %s at %s", args=("XRD", "1.5"))

        log_dict = json.loads(formatter.format(record))

        assert log_dict["message"] == "Quote for XRD at 1.5"
