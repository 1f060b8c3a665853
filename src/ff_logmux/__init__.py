"""
ff-logmux: Pluggable structured logging for Fenixflow applications.

One logger API over stream, file, syslog, in-memory and structlog backends,
with transaction tokens, caller attribution and multiplexing.
"""

__version__ = "0.1.0"

from .backends import BackendFactory, BackendKind, default_factory
from .bridge import BridgeSink
from .config import (
    configure_logging,
    get_config,
    get_default_logger,
    get_logger,
    reset_config,
    set_default_logger,
    set_silencer,
    silencer,
    silencer_enabled,
)
from .document import DocumentSink
from .exceptions import (
    BackendUnavailableError,
    DestinationUnwritableError,
    InvalidLevelError,
    LoggingError,
    UnknownBackendError,
)
from .formatter import LineFormatter, clean_quote, format_attributes
from .logger import StructuredLogger
from .multi import MultiLogger
from .severity import Severity
from .sinks import BufferSink, FileSink, LoggerSink, Sink, StreamSink, SyslogSink

__all__ = [
    "StructuredLogger",
    "MultiLogger",
    "Severity",
    "BackendFactory",
    "BackendKind",
    "default_factory",
    "Sink",
    "StreamSink",
    "BufferSink",
    "FileSink",
    "SyslogSink",
    "LoggerSink",
    "DocumentSink",
    "BridgeSink",
    "LineFormatter",
    "clean_quote",
    "format_attributes",
    "configure_logging",
    "get_config",
    "get_logger",
    "get_default_logger",
    "set_default_logger",
    "reset_config",
    "set_silencer",
    "silencer",
    "silencer_enabled",
    "LoggingError",
    "UnknownBackendError",
    "InvalidLevelError",
    "BackendUnavailableError",
    "DestinationUnwritableError",
]
