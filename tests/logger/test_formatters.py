"""Tests for console formatters and environment-driven log settings."""

import logging

import pytest

from manifest_publisher.core.protocols import (
    EventSink,
    LoggerEventSink,
    NullEventSink,
)
from manifest_publisher.logger.config import (
    annotations_enabled,
    load_log_level,
)
from manifest_publisher.logger.formatters import (
    ActionsAnnotationFormatter,
    HybridConsoleFormatter,
)


def make_record(level, message, *args):
    return logging.LogRecord(
        name="manifest_publisher.test",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args,
        exc_info=None,
    )


class TestHybridConsoleFormatter:
    """INFO is plain, everything else is structured."""

    def test_info_is_message_only(self):
        formatter = HybridConsoleFormatter("%(levelname)s - %(message)s")
        record = make_record(logging.INFO, "sha256=%s", "abc")
        assert formatter.format(record) == "sha256=abc"

    def test_warning_is_structured_and_colored(self):
        formatter = HybridConsoleFormatter("%(levelname)s - %(message)s")
        record = make_record(logging.WARNING, "Rate limit low")
        output = formatter.format(record)
        assert "WARNING" in output
        assert output.endswith(" - Rate limit low")
        assert "\033[" in output
        assert record.levelname == "WARNING"


class TestActionsAnnotationFormatter:
    """Warnings and errors become workflow commands."""

    @pytest.fixture
    def formatter(self):
        return ActionsAnnotationFormatter()

    def test_info_is_plain(self, formatter):
        assert formatter.format(make_record(logging.INFO, "url=x")) == "url=x"

    def test_debug_is_plain(self, formatter):
        record = make_record(logging.DEBUG, "detail")
        assert formatter.format(record) == "detail"

    def test_warning(self, formatter):
        record = make_record(logging.WARNING, "careful")
        assert formatter.format(record) == "::warning::careful"

    def test_error_escapes_newlines_and_percent(self, formatter):
        record = make_record(logging.ERROR, "line one\nline two 100%")
        assert formatter.format(record) == (
            "::error::line one%0Aline two 100%25"
        )


class TestLogSettings:
    """Tests for environment-driven settings."""

    def test_explicit_level(self):
        assert load_log_level({"LOG_LEVEL": "warning"}) == "WARNING"

    def test_invalid_level_ignored(self):
        assert load_log_level({"LOG_LEVEL": "chatty"}) == "INFO"

    def test_runner_debug(self):
        assert load_log_level({"RUNNER_DEBUG": "1"}) == "DEBUG"

    def test_explicit_level_wins_over_runner_debug(self):
        env = {"LOG_LEVEL": "ERROR", "RUNNER_DEBUG": "1"}
        assert load_log_level(env) == "ERROR"

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert load_log_level() == "DEBUG"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), ("TRUE", True), ("false", False), ("", False)],
    )
    def test_annotations_enabled(self, value, expected):
        assert annotations_enabled({"GITHUB_ACTIONS": value}) is expected


class TestEventSinks:
    """Tests for the event sink implementations."""

    def test_implementations_satisfy_protocol(self):
        assert isinstance(NullEventSink(), EventSink)
        assert isinstance(LoggerEventSink(), EventSink)

    def test_null_sink_discards(self):
        sink = NullEventSink()
        assert sink.info("x=%s", 1) is None
        assert sink.error("boom") is None

    def test_logger_sink_forwards(self, caplog):
        sink = LoggerEventSink(logging.getLogger("manifest_publisher.t"))
        with caplog.at_level(logging.INFO):
            sink.info("sha256=%s", "abc")
            sink.error("conflict on %s", "version")
        messages = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert (logging.INFO, "sha256=abc") in messages
        assert (logging.ERROR, "conflict on version") in messages
