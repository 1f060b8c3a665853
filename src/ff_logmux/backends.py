"""
Factory turning backend descriptors into sinks.
"""

import os
from collections.abc import Callable
from enum import Enum
from typing import Any, NamedTuple

from . import config
from .bridge import BridgeSink
from .document import DocumentSink
from .exceptions import BackendUnavailableError, DestinationUnwritableError, UnknownBackendError
from .formatter import LineFormatter
from .sinks import (
    BufferSink,
    FileSink,
    LoggerSink,
    Sink,
    StreamSink,
    SyslogSink,
    stderr_sink,
    stdout_sink,
)

# builder(progname, formatter) -> Sink
SinkBuilder = Callable[[str, LineFormatter], Sink]


class BackendKind(str, Enum):
    """Symbolic backend names."""

    STDERR = "stderr"
    STDOUT = "stdout"
    BUFFER = "buffer"
    DOCUMENT = "document"
    SYSLOG = "syslog"
    BRIDGE = "bridge"


class SinkResult(NamedTuple):
    """A created sink and the warning to log through it, if any."""

    sink: Sink
    warning: str | None = None


def _build_syslog(progname: str, formatter: LineFormatter) -> Sink:
    return SyslogSink(
        address=config.get_setting("syslog_address"),
        facility=config.get_setting("syslog_facility"),
        progname=progname,
        formatter=formatter,
    )


class BackendFactory:
    """
    Creates sinks from backend descriptors.

    A descriptor is one of:
        - a Sink, used as is
        - None, meaning the configured default backend
        - a BackendKind or a registered backend name ("buffer", "syslog", ...)
        - any other string or path-like: a log file path
        - an object with a ``log(level, msg)`` method: a pre-built logger
        - an object with a ``write`` method: a text stream

    Creation is one-shot. A backend that is unavailable, or a file that is
    not writable, falls back to a stderr stream sink and reports a warning
    in the result; the caller logs it once the sink is live.
    """

    def __init__(self):
        """Initialize the factory with the default backends."""
        self._builders: dict[str, SinkBuilder] = {}

        # Register default backends
        self._register_default_backends()

    def _register_default_backends(self):
        """Register the default set of backends."""
        self.register_backend(BackendKind.STDERR, stderr_sink)
        self.register_backend(BackendKind.STDOUT, stdout_sink)
        self.register_backend(BackendKind.BUFFER, BufferSink)
        self.register_backend(BackendKind.DOCUMENT, DocumentSink)
        self.register_backend(BackendKind.SYSLOG, _build_syslog)
        self.register_backend(BackendKind.BRIDGE, BridgeSink)

    def register_backend(self, name: str, builder: SinkBuilder) -> None:
        """
        Register a symbolic backend.

        Args:
            name: Name used as descriptor
            builder: Callable taking (progname, formatter) and returning a Sink
        """
        self._builders[self._key(name)] = builder

    def backend_names(self) -> list[str]:
        """Get the names of all registered backends."""
        return sorted(self._builders)

    def is_registered(self, descriptor: Any) -> bool:
        """Whether a descriptor names a registered backend."""
        return isinstance(descriptor, str) and self._key(descriptor) in self._builders

    @staticmethod
    def _key(name: str) -> str:
        return name.value if isinstance(name, BackendKind) else name

    def create(
        self,
        descriptor: Any,
        progname: str,
        formatter: LineFormatter | None = None,
    ) -> SinkResult:
        """
        Create a sink for a descriptor.

        Args:
            descriptor: Backend descriptor (see class docstring)
            progname: Program name applied to created sinks
            formatter: Line formatter applied to created sinks

        Returns:
            SinkResult with the sink and an optional fallback warning

        Raises:
            UnknownBackendError: If the descriptor matches no backend
        """
        formatter = formatter or LineFormatter()

        # Pre-built sinks and loggers are used as they are
        if isinstance(descriptor, Sink):
            return SinkResult(descriptor)

        if descriptor is None:
            descriptor = config.get_setting("backend")

        if self.is_registered(descriptor):
            name = self._key(descriptor)
            try:
                sink = self._builders[name](progname, formatter)
            except BackendUnavailableError as e:
                warning = f"Couldn't load {name} backend ({e.reason}), reverting to standard logger"
                return SinkResult(self._fallback(progname, formatter), warning)
        elif isinstance(descriptor, str | os.PathLike):
            try:
                sink = FileSink(descriptor, progname=progname, formatter=formatter)
            except DestinationUnwritableError as e:
                warning = f"{e.path} not writable, using STDERR for logging"
                return SinkResult(self._fallback(progname, formatter), warning)
        elif callable(getattr(descriptor, "log", None)):
            return SinkResult(LoggerSink(descriptor))
        elif callable(getattr(descriptor, "write", None)):
            sink = StreamSink(descriptor, progname=progname, formatter=formatter)
        else:
            raise UnknownBackendError(descriptor, self.backend_names())

        # Re-apply formatter and program name to the fresh sink
        sink.formatter = formatter
        sink.progname = progname
        return SinkResult(sink)

    def _fallback(self, progname: str, formatter: LineFormatter) -> Sink:
        return stderr_sink(progname, formatter)


# Process-wide factory used by loggers that are not given one
default_factory = BackendFactory()
