"""
Tests for the structlog bridge backend and its processors.
"""

import io
import json
import os

import pytest
import structlog
from ff_logmux import BridgeSink, Severity, StructuredLogger, configure_logging
from ff_logmux.processors import ProgramInfo, add_severity, default_processors, get_renderer


class TestBridgeSink:
    """Test logging through structlog."""

    def test_json_output(self):
        stream = io.StringIO()
        log = StructuredLogger(BridgeSink("pytest", stream=stream), level="debug")
        log.token = "req-1"

        log.warn("slow", ms=250)

        event = json.loads(stream.getvalue())
        assert event["message"] == "[req-1] slow ms=250"
        assert event["severity"] == "WARN"
        assert event["progname"] == "pytest"
        assert event["pid"] == os.getpid()
        assert "timestamp" in event
        assert "event" not in event

    def test_one_line_per_message(self):
        stream = io.StringIO()
        sink = BridgeSink("pytest", stream=stream)

        for severity in Severity:
            sink.accept(severity, f"at {severity.name}")

        events = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert [e["severity"] for e in events] == ["DEBUG", "INFO", "WARN", "ERROR", "FATAL", "ANY"]

    def test_default_stream_is_stderr(self, capsys):
        log = StructuredLogger("bridge", "pytest")
        log.info("hello")

        event = json.loads(capsys.readouterr().err)
        assert event["message"] == "hello"
        assert event["progname"] == "pytest"

    def test_progname_follows_logger(self):
        stream = io.StringIO()
        log = StructuredLogger(BridgeSink("before", stream=stream))

        log.backend.progname = "after"
        log.info("renamed")

        assert json.loads(stream.getvalue())["progname"] == "after"

    def test_logfmt_renderer(self):
        stream = io.StringIO()
        sink = BridgeSink("pytest", stream=stream, renderer="logfmt")

        sink.accept(Severity.INFO, "hello")

        line = stream.getvalue()
        assert "message=hello" in line
        assert "severity=INFO" in line
        assert "progname=pytest" in line

    def test_console_renderer(self):
        stream = io.StringIO()
        sink = BridgeSink("pytest", stream=stream, renderer="console")

        sink.accept(Severity.ERROR, "broken")

        line = stream.getvalue()
        assert "broken" in line
        assert "ERROR" in line

    def test_renderer_from_config(self):
        configure_logging(bridge_renderer="logfmt", use_env=False)
        sink = BridgeSink("pytest", stream=io.StringIO())
        assert sink.renderer == "logfmt"

    def test_custom_processors(self):
        stream = io.StringIO()
        sink = BridgeSink(
            "pytest",
            stream=stream,
            processors=[structlog.processors.KeyValueRenderer(key_order=["event"])],
        )

        sink.accept(Severity.INFO, "plain")

        assert stream.getvalue().startswith("event='plain'")

    def test_underlying_logger(self):
        sink = BridgeSink("pytest", stream=io.StringIO())
        assert hasattr(sink.logger, "info")


class TestProcessors:
    """Test the structlog processors."""

    def test_add_severity(self):
        assert add_severity(None, "warning", {})["severity"] == "WARN"
        assert add_severity(None, "critical", {})["severity"] == "FATAL"
        assert add_severity(None, "msg", {})["severity"] == "ANY"

    def test_add_severity_keeps_explicit(self):
        event = add_severity(None, "critical", {"severity": "ANY"})
        assert event["severity"] == "ANY"

    def test_program_info(self):
        info = ProgramInfo("worker")

        event = info(None, "info", {"event": "x"})

        assert event == {"event": "x", "progname": "worker", "pid": os.getpid()}

    def test_program_info_keeps_existing(self):
        event = ProgramInfo("worker")(None, "info", {"progname": "other"})
        assert event["progname"] == "other"

    def test_unknown_renderer(self):
        with pytest.raises(ValueError, match="Unknown bridge renderer"):
            get_renderer("xml")

    def test_default_chain_ends_with_renderer(self):
        chain = default_processors(ProgramInfo("pytest"), "json")

        assert chain[0] is add_severity
        assert isinstance(chain[-1], structlog.processors.JSONRenderer)
        assert any(isinstance(p, structlog.processors.EventRenamer) for p in chain)

    def test_console_chain_keeps_event(self):
        chain = default_processors(ProgramInfo("pytest"), "console")
        assert not any(isinstance(p, structlog.processors.EventRenamer) for p in chain)
