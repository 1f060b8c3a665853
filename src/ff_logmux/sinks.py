"""
Sinks: the destinations that receive rendered log messages.

Stream, file, buffer and syslog sinks drive a standard library
logging.Handler, which takes care of locking, flushing and closing.
"""

import io
import logging
import logging.handlers
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, TextIO

from .exceptions import BackendUnavailableError, DestinationUnwritableError
from .formatter import LineFormatter, SyslogFormatter
from .severity import Severity


class Sink(ABC):
    """
    Base class for all sinks.

    A sink accepts an already rendered message together with its severity.
    Level gating happens before a sink is reached.
    """

    sync = True

    def __init__(self, progname: str = "", formatter: LineFormatter | None = None):
        self.progname = progname
        self.formatter = formatter or LineFormatter()

    @abstractmethod
    def accept(self, severity: Severity, message: str) -> None:
        """Write one message."""

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(progname={self.progname!r})"


class HandlerSink(Sink):
    """A sink writing through one standard library logging handler."""

    def __init__(
        self,
        handler: logging.Handler,
        progname: str = "",
        formatter: LineFormatter | None = None,
    ):
        self.handler = handler
        self.pid = os.getpid()
        super().__init__(progname=progname, formatter=formatter)

    @property
    def formatter(self) -> LineFormatter:
        return self._formatter

    @formatter.setter
    def formatter(self, formatter: LineFormatter) -> None:
        self._formatter = formatter
        self._install_formatter(formatter)

    def _install_formatter(self, formatter: LineFormatter) -> None:
        self.handler.setFormatter(formatter)

    def accept(self, severity: Severity, message: str) -> None:
        record = logging.LogRecord(
            self.progname or "ff_logmux",
            severity.stdlib_level,
            "",
            0,
            message,
            None,
            None,
        )
        record.severity = severity
        record.progname = self.progname
        record.pid = self.pid
        self.handler.handle(record)

    def flush(self) -> None:
        self.handler.flush()

    def close(self) -> None:
        self.handler.close()


class StreamSink(HandlerSink):
    """
    Writes formatted lines to a text stream.

    The stream is never closed by the sink; closing only releases the
    handler. Unless given, ``sync`` follows ``stream.isatty()``: terminals
    are treated as always-flush, other streams as buffered.
    """

    def __init__(
        self,
        stream: TextIO,
        progname: str = "",
        formatter: LineFormatter | None = None,
        sync: bool | None = None,
    ):
        self.stream = stream
        if sync is None:
            isatty = getattr(stream, "isatty", None)
            sync = bool(isatty()) if callable(isatty) else False
        self.sync = sync
        handler = logging.StreamHandler(stream)
        # The line template carries its own newline
        handler.terminator = ""
        super().__init__(handler, progname=progname, formatter=formatter)

    def __repr__(self) -> str:
        name = getattr(self.stream, "name", type(self.stream).__name__)
        return f"StreamSink(stream={name!r}, progname={self.progname!r})"


class BufferSink(StreamSink):
    """Keeps formatted lines in memory; useful for tests and benchmarks."""

    def __init__(self, progname: str = "", formatter: LineFormatter | None = None):
        self._buffer = io.StringIO()
        super().__init__(self._buffer, progname=progname, formatter=formatter, sync=False)

    @property
    def buffer(self) -> str:
        """Everything written so far, also available after close()."""
        return self._buffer.getvalue()


class FileSink(HandlerSink):
    """Appends formatted lines to a file, creating parent directories."""

    def __init__(
        self,
        path: str | os.PathLike,
        progname: str = "",
        formatter: LineFormatter | None = None,
    ):
        self.path = os.fspath(path)
        try:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        except OSError as e:
            raise DestinationUnwritableError(self.path, str(e)) from e

        handler.terminator = ""
        super().__init__(handler, progname=progname, formatter=formatter)

    def __repr__(self) -> str:
        return f"FileSink(path={self.path!r}, progname={self.progname!r})"


class SyslogSink(HandlerSink):
    """
    Delegates to the system syslog daemon.

    The program name and pid are sent as the syslog ident; time and host
    are added by the daemon.
    """

    def __init__(
        self,
        address: str | tuple[str, int] = "/dev/log",
        facility: str = "local1",
        progname: str = "",
        formatter: LineFormatter | None = None,
    ):
        self.address = address

        if isinstance(address, str) and not os.path.exists(address):
            raise BackendUnavailableError("syslog", f"no syslog socket at {address}")

        try:
            facility_code = logging.handlers.SysLogHandler.facility_names[facility]
            handler = logging.handlers.SysLogHandler(address=address, facility=facility_code)
        except KeyError:
            raise BackendUnavailableError("syslog", f"unknown facility {facility!r}") from None
        except OSError as e:
            raise BackendUnavailableError("syslog", str(e)) from e

        super().__init__(handler, progname=progname, formatter=formatter)

    def _install_formatter(self, formatter: LineFormatter) -> None:
        self.handler.setFormatter(SyslogFormatter())

    def accept(self, severity: Severity, message: str) -> None:
        self.handler.ident = f"{self.progname}[{self.pid}]: "
        super().accept(severity, message)


class LoggerSink(Sink):
    """
    Forwards to a pre-built logger object.

    Anything with a ``log(level, msg)`` method works: logging.Logger,
    logging.LoggerAdapter or a structlog bound logger. The handle is used
    as is; its handlers and formatters are left alone and it is not
    closed by the sink.
    """

    def __init__(self, handle: Any):
        self.handle = handle
        super().__init__(progname=getattr(handle, "name", "") or "")

    def accept(self, severity: Severity, message: str) -> None:
        self.handle.log(severity.stdlib_level, message)

    def flush(self) -> None:
        for handler in getattr(self.handle, "handlers", ()):
            handler.flush()

    def __repr__(self) -> str:
        return f"LoggerSink(handle={self.handle!r})"


def stderr_sink(progname: str = "", formatter: LineFormatter | None = None) -> StreamSink:
    """Always-flush stream sink on the current sys.stderr."""
    return StreamSink(sys.stderr, progname=progname, formatter=formatter, sync=True)


def stdout_sink(progname: str = "", formatter: LineFormatter | None = None) -> StreamSink:
    """Always-flush stream sink on the current sys.stdout."""
    return StreamSink(sys.stdout, progname=progname, formatter=formatter, sync=True)
