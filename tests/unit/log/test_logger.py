"""
Tests for Logger, LoggerFactory and LogFormatter.

Tests key logging features including:
- Root logger creation and reuse
- Derived view loggers sharing root handlers
- Extra field rendering
- TRACE level and disabled logging
"""

import collections
import logging
import sys
from io import StringIO

import pytest

from sexec.log import (
    LogConfig,
    LogFormatter,
    Logger,
    LoggerFactory,
    create_root_lg,
    derive_lg,
)

# =============================================================================
# Test LoggerFactory
# =============================================================================


@pytest.mark.unit
class TestLoggerFactory:
    """Test logger creation."""

    def test_create_root(self, lg):
        assert isinstance(lg, Logger)
        assert lg.name == "/"
        assert lg.propagate is False
        assert len(lg.handlers) == 1

    def test_create_returns_existing(self, sample_log_config):
        first = LoggerFactory.create("/jobs", sample_log_config)
        second = LoggerFactory.create("/jobs", sample_log_config)
        assert first is second

    def test_derive_name(self, lg):
        assert LoggerFactory.derive(lg, "process").name == "/process"
        assert LoggerFactory.derive(lg, ["jobs", "build"]).name == "/jobs/build"

    def test_derive_from_derived(self, lg):
        child = LoggerFactory.derive(lg, "jobs")
        assert LoggerFactory.derive(child, "build").name == "/jobs/build"

    def test_derived_uses_root_handlers(self, lg, log_stream):
        child = derive_lg(lg, "process")
        assert child.handlers == []
        child.info("from child")
        assert "from child" in log_stream.getvalue()
        assert "[/process]" in log_stream.getvalue()

    def test_derived_respects_parent_level(self, log_stream):
        root = create_root_lg("warning", colors=False, stream=log_stream)
        child = derive_lg(root, "process")
        child.info("hidden")
        child.warning("shown")
        output = log_stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_derived_inherits_extra(self, sample_log_config, log_stream):
        root = LoggerFactory.create(
            "/", sample_log_config, extra={"service": "jobs"}, stream=log_stream
        )
        child = LoggerFactory.derive(root, "process", extra={"worker": 2})
        child.info("hello")
        output = log_stream.getvalue()
        assert "[service:jobs]" in output
        assert "[worker:2]" in output


# =============================================================================
# Test Logger
# =============================================================================


@pytest.mark.unit
class TestLogger:
    """Test logger behavior."""

    def test_extra_fields_rendered_sorted(self, lg, log_stream):
        lg.info("started", extra={"pid": 12, "command": "ls"})
        output = log_stream.getvalue()
        assert "[command:ls] [pid:12]" in output

    def test_ordered_extra_keeps_order(self, lg, log_stream):
        lg.info("started", extra=collections.OrderedDict([("pid", 12), ("cmd", "ls")]))
        assert "[pid:12] [cmd:ls]" in log_stream.getvalue()

    def test_trace_level(self, log_stream):
        lg = create_root_lg("trace", colors=False, stream=log_stream)
        lg.trace("fine detail")
        assert "[T] fine detail" in log_stream.getvalue()

    def test_trace_hidden_at_debug(self, lg, log_stream):
        lg.trace("fine detail")
        assert log_stream.getvalue() == ""

    def test_disabled_logger(self, log_stream):
        lg = create_root_lg(False, stream=log_stream)
        assert lg.disabled is True
        lg.error("nothing")
        assert log_stream.getvalue() == ""
        assert lg.get_level() is False

    def test_exception_field_shows_type(self, lg, log_stream):
        lg.error("failed", extra={"exception": ValueError("bad")})
        assert "[exception:ValueError]" in log_stream.getvalue()


# =============================================================================
# Test LogFormatter
# =============================================================================


@pytest.mark.unit
class TestLogFormatter:
    """Test record formatting."""

    def _record(self, **extra) -> logging.LogRecord:
        lg = Logger("/fmt", LogConfig.from_params("debug"), extra=extra)
        return lg.makeRecord("/fmt", logging.INFO, "file.py", 10, "msg", (), None)

    def test_plain_layout(self):
        formatter = LogFormatter(LogConfig.from_params("info", colors=False))
        line = formatter.format(self._record(pid=3))
        assert line.startswith("[")
        assert "] [I] msg" in line
        assert line.rstrip().endswith("[pid:3] [%d] [/fmt]" % self._record().process)

    def test_location(self):
        formatter = LogFormatter(LogConfig.from_params("info", location=1, colors=False))
        assert "[file.py:10]" in formatter.format(self._record())

    def test_colors(self):
        formatter = LogFormatter(LogConfig.from_params("info", colors=True))
        line = formatter.format(self._record())
        assert "\x1b[" in line
        assert line.endswith("\x1b[0m")

    def test_micros(self):
        formatter = LogFormatter(LogConfig.from_params("info", micros=True, colors=False))
        plain = LogFormatter(LogConfig.from_params("info", colors=False))
        record = self._record()
        assert len(formatter.formatTime(record)) == len(plain.formatTime(record)) + 4

    def test_exception_text_appended(self):
        formatter = LogFormatter(LogConfig.from_params("info", colors=False))
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            lg = Logger("/fmt", LogConfig.from_params("debug"))
            record = lg.makeRecord(
                "/fmt", logging.ERROR, "f.py", 1, "failed", (), sys.exc_info()
            )
        line = formatter.format(record)
        assert "RuntimeError: boom" in line


@pytest.mark.unit
class TestCreateRootLg:
    """Test the convenience constructor."""

    def test_writes_to_stream(self):
        stream = StringIO()
        lg = create_root_lg("info", colors=False, stream=stream)
        lg.info("ready")
        assert "[I] ready" in stream.getvalue()
        assert "[/]" in stream.getvalue()
