"""
Tests for MultiLogger.
"""

import io

import pytest
from ff_logmux import MultiLogger, Severity, StructuredLogger

TOKEN = "3d5e27f7-b97c-4adc-b1fd-adf1bd4314e0"


@pytest.fixture
def pair():
    """Two document loggers."""
    return StructuredLogger("document", "first"), StructuredLogger("document", "second")


def messages(logger):
    return [record["message"] for record in logger.records]


class TestAttachDetach:
    """Test attaching and detaching loggers."""

    def test_fan_out(self):
        stream = io.StringIO()
        first = StructuredLogger(stream, "pytest")
        multi = MultiLogger(first)

        second = multi.attach(StructuredLogger("buffer", "pytest"))
        multi.info("to both")

        assert "[INFO] to both" in stream.getvalue()
        assert "[INFO] to both" in second.buffer

        multi.detach(first)
        multi.info("second only")

        assert "second only" not in stream.getvalue()
        assert "second only" in second.buffer

    def test_attach_returns_logger(self, pair):
        multi = MultiLogger()
        assert multi.attach(pair[0]) is pair[0]
        assert multi.loggers == (pair[0],)

    def test_attach_copies_token(self, pair):
        first, second = pair
        first.token = TOKEN
        multi = MultiLogger(first)

        multi.attach(second)
        multi.info("joined")

        assert second.token == TOKEN
        assert messages(second) == [f"[{TOKEN}] joined"]

    def test_detach_absent_logger(self, pair):
        multi = MultiLogger(pair[0])
        multi.detach(pair[1])
        assert multi.loggers == (pair[0],)

    def test_detach_does_not_close(self, recording_sink):
        logger = StructuredLogger(recording_sink)
        multi = MultiLogger(logger)

        multi.detach(logger)

        assert len(multi) == 0
        assert not recording_sink.closed

    def test_attach_order(self, pair):
        multi = MultiLogger(*pair)
        assert list(multi) == list(pair)


class TestForwarding:
    """Test method and attribute forwarding."""

    def test_level_methods(self, pair):
        multi = MultiLogger(*pair)

        multi.warn("careful", code=7)
        multi.log("error", "broken")

        for logger in pair:
            assert messages(logger) == ["careful code=7", "broken"]
            assert logger.records[0]["severity"] == Severity.WARN

    def test_returns_first_result(self, pair):
        first, second = pair
        second.level = "fatal"
        multi = MultiLogger(first, second)

        assert multi.info("hello") is True
        assert messages(second) == []

        first.level = "fatal"
        second.level = "debug"
        assert multi.info("again") is False
        assert messages(second) == ["again"]

    def test_property_read_uses_first_logger(self, pair):
        first, second = pair
        first.level = "warn"
        second.level = "error"

        multi = MultiLogger(first, second)
        assert multi.level is Severity.WARN
        assert multi.progname == "first"

    def test_assignment_applies_to_all(self, pair):
        multi = MultiLogger(*pair)

        multi.level = "error"
        multi.token = TOKEN
        multi.log_caller = True

        for logger in pair:
            assert logger.level is Severity.ERROR
            assert logger.token == TOKEN
            assert logger.log_caller is True

    def test_instance_attribute_read(self, pair):
        multi = MultiLogger(*pair)
        assert multi.log_caller is False

    def test_exception(self, pair):
        multi = MultiLogger(*pair)
        multi.exception(ValueError("boom"))

        for logger in pair:
            assert messages(logger) == ["exception class=ValueError reason=boom message="]

    def test_save_and_restore_token(self, pair):
        multi = MultiLogger(*pair)
        key = object()

        multi.token = TOKEN
        multi.save_token(key)
        multi.token = "other"
        multi.restore_token(key)

        assert all(logger.token == TOKEN for logger in pair)

    def test_unknown_attribute(self, pair):
        multi = MultiLogger(*pair)
        with pytest.raises(AttributeError):
            multi.does_not_exist

    def test_empty_multi(self):
        multi = MultiLogger()

        assert multi.info("nowhere") is None
        assert multi.level is None
        multi.level = "info"


class TestSilenceAndRealtime:
    """Test helpers that wrap a block of work."""

    def test_silence_all(self, pair):
        multi = MultiLogger(*pair)

        with multi.silence() as silenced:
            silenced.info("hidden")
            silenced.error("shown")

        for logger in pair:
            assert messages(logger) == ["shown"]
            assert logger.level is Severity.DEBUG

    def test_silence_restores_after_error(self, pair):
        multi = MultiLogger(*pair)

        with pytest.raises(RuntimeError):
            with multi.silence("fatal"):
                raise RuntimeError("inside")

        assert all(logger.level is Severity.DEBUG for logger in pair)

    def test_realtime_runs_once(self, pair):
        multi = MultiLogger(*pair)
        calls = []

        def work():
            calls.append(1)
            return "done"

        assert multi.realtime("info", "timed", work, table="users") == "done"
        assert calls == [1]

        for logger in pair:
            assert len(logger.records) == 1
            assert messages(logger)[0].startswith("timed table=users rt=")
