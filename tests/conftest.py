"""
Pytest configuration and fixtures for ff-logmux tests.
"""

import pytest
from ff_logmux import Sink, StructuredLogger
from ff_logmux.config import reset_config


@pytest.fixture(autouse=True)
def clean_config():
    """Start and end every test with the default global configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def logger():
    """A debug-level logger on the document backend."""
    log = StructuredLogger("document", "pytest", level="debug")
    yield log
    log.close()


@pytest.fixture
def last_message(logger):
    """Return the message of the most recent record."""

    def _last():
        records = logger.records
        return records[-1]["message"] if records else None

    return _last


class RecordingSink(Sink):
    """Sink that keeps (severity, message) pairs and remembers close()."""

    def __init__(self):
        super().__init__(progname="recording")
        self.lines = []
        self.closed = False

    def accept(self, severity, message):
        self.lines.append((severity, message))

    def close(self):
        self.closed = True


@pytest.fixture
def recording_sink():
    """A fresh RecordingSink."""
    return RecordingSink()
