"""Tests for JSON and console log formatters."""

import json
import logging
import sys
from datetime import UTC, datetime

import pytest

from core.logging.context import clear_log_context, set_log_context
from core.logging.formatters import ConsoleFormatter, JSONFormatter


def _make_record(
    msg="test message",
    level=logging.INFO,
    name="test.logger",
    exc_info=None,
    **extras,
):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def clear_context():
    clear_log_context()
    yield
    clear_log_context()


class TestJSONFormatter:

    def test_formats_basic_json_with_required_fields(self):
        formatter = JSONFormatter()
        output = json.loads(formatter.format(_make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "test.logger"
        assert output["message"] == "test message"
        assert output["ts"].endswith("Z")

    def test_includes_context(self):
        set_log_context(operation="screenshot", operation_id="ss_1", trace_id="t-1")
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["operation"] == "screenshot"
        assert output["operation_id"] == "ss_1"
        assert output["trace_id"] == "t-1"

    def test_empty_context_is_omitted(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert "operation" not in output
        assert "trace_id" not in output

    def test_record_extra_overrides_context(self):
        set_log_context(operation_id="from-context")
        record = _make_record(operation_id="from-record")
        output = json.loads(JSONFormatter().format(record))

        assert output["operation_id"] == "from-record"

    def test_includes_whitelisted_extras_only(self):
        record = _make_record(api_method="GET", status="processing", not_whitelisted="x")
        output = json.loads(JSONFormatter().format(record))

        assert output["api_method"] == "GET"
        assert output["status"] == "processing"
        assert "not_whitelisted" not in output

    def test_numeric_fields_are_typed(self):
        record = _make_record(http_status="404", duration_seconds="1.5", poll_count="abc")
        output = json.loads(JSONFormatter().format(record))

        assert output["http_status"] == 404
        assert output["duration_seconds"] == 1.5
        assert output["poll_count"] is None

    def test_redacts_sensitive_url_params(self):
        record = _make_record(image_url="https://cdn.example.com/a.png?sig=abc123&w=100&token=xyz")
        output = json.loads(JSONFormatter().format(record))

        assert output["image_url"] == "https://cdn.example.com/a.png?sig=[REDACTED]&w=100&token=[REDACTED]"

    def test_non_url_fields_are_not_redacted(self):
        record = _make_record(error_message="?token=abc")
        output = json.loads(JSONFormatter().format(record))

        assert output["error_message"] == "?token=abc"

    def test_source_location_for_debug_and_error(self):
        debug = json.loads(JSONFormatter().format(_make_record(level=logging.DEBUG)))
        info = json.loads(JSONFormatter().format(_make_record(level=logging.INFO)))

        assert debug["file"] == "test.py:42"
        assert "file" not in info

    def test_structured_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = json.loads(JSONFormatter().format(record))

        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "boom"
        assert "Traceback" in output["exception"]["stacktrace"]

    def test_non_json_values_are_serialized(self):
        record = _make_record(elapsed_seconds=None, url=None, status=datetime(2024, 1, 1, tzinfo=UTC))
        output = json.loads(JSONFormatter().format(record))

        assert output["status"] == "2024-01-01T00:00:00+00:00"


class TestConsoleFormatter:

    @pytest.fixture
    def formatter(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = False
        return formatter

    def test_basic_format(self, formatter):
        output = formatter.format(_make_record())

        assert " - INFO - test message" in output

    def test_operation_prefix_and_tags(self, formatter):
        set_log_context(operation="workflow_run", operation_id="run_0123456789abcdef", trace_id="t-20240101")
        output = formatter.format(_make_record(status="running"))

        assert "[workflow_run]" in output
        assert "[op:run_01234567]" in output
        assert "[t-202401]" in output
        assert "[running]" in output

    def test_colors_when_enabled(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = True
        output = formatter.format(_make_record(level=logging.ERROR))

        assert "\033[31mERROR\033[0m" in output

    def test_includes_exception(self, formatter):
        try:
            raise RuntimeError("kaput")
        except RuntimeError:
            record = _make_record(exc_info=sys.exc_info())

        output = formatter.format(record)

        assert "RuntimeError: kaput" in output
