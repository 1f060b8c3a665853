"""
StructuredLogger: one logging API over interchangeable backends.
"""

import os
import sys
import time
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from . import config
from .backends import BackendFactory, SinkResult, default_factory
from .caller import clean_trace, format_backtrace, resolve_caller
from .document import DocumentSink
from .formatter import LineFormatter, format_attributes
from .severity import Severity
from .sinks import BufferSink, LoggerSink, Sink
from .tokens import TokenStore

# A message, or a zero-argument callable returning a message or a
# (message, attributes) tuple; callables only run when the level is enabled
Message = Any


class StructuredLogger:
    """
    A leveled logger with key=value attributes and a swappable backend.

    The backend can be a stream, a file path, a symbolic name ("buffer",
    "document", "syslog", "bridge", "stdout", "stderr"), a pre-built logger
    or a Sink. See BackendFactory for the full list.

    Every level method checks the threshold first. Nothing is formatted and
    no callable message is evaluated for disabled levels:

        logger.debug(lambda: f"state: {expensive_dump()}")

    Instances are not safe for concurrent mutation (level, backend, token).
    Logging calls from several threads are fine as long as the backend's
    writes are, which holds for stream, file and syslog sinks but not for
    the buffer and document sinks.

    Example:
        logger = StructuredLogger("/var/log/app.log", "app")
        logger.token = request_id
        logger.info("user login", user="jdoe", ip="10.0.0.1")
        # 2024-01-01 12:00:00.000123 app(4242) [INFO] [req-1] user login user=jdoe ip=10.0.0.1
    """

    def __init__(
        self,
        backend: Any = None,
        progname: str | None = None,
        *,
        level: str | int | Severity | None = None,
        log_caller: bool | None = None,
        formatter: LineFormatter | None = None,
        factory: BackendFactory | None = None,
    ):
        """
        Initialize a structured logger.

        Args:
            backend: Backend descriptor (default: configured backend)
            progname: Program name (default: base name of sys.argv[0])
            level: Minimum severity (default: configured level)
            log_caller: Append file=/line= of the calling code to each message
            formatter: Line formatter for text sinks
            factory: Backend factory (default: the process-wide factory)

        Raises:
            UnknownBackendError: If the backend descriptor is not recognized
            InvalidLevelError: If the level is not a known severity
        """
        self._progname = progname or os.path.basename(sys.argv[0] if sys.argv else "") or "python"
        self._formatter = formatter or LineFormatter()
        self._factory = factory or default_factory
        self._tokens = TokenStore()
        self._level = Severity.parse(config.get_setting("level") if level is None else level)
        self.log_caller = config.get_setting("log_caller") if log_caller is None else log_caller

        # Called with (exception, payload) by exception(); hook for error reporting services
        self.reporter: Callable[[BaseException, dict[str, Any]], Any] | None = None

        # Also print every emitted message to stdout
        self.copy_to_stdout = False

        self._descriptor: Any = None
        self._sink: Sink | None = None
        # Last closed sink; buffer and records stay readable after close()
        self._closed_sink: Sink | None = None
        self.backend = backend

    # Backend

    @property
    def backend(self) -> Any:
        """The live sink, or the logger object itself for pre-built loggers."""
        sink = self._current_sink()
        if isinstance(sink, LoggerSink):
            return sink.handle
        return sink

    @backend.setter
    def backend(self, descriptor: Any) -> None:
        # A rejected descriptor leaves the current backend in place
        result = self._factory.create(descriptor, self._progname, self._formatter)
        if result.sink is not self._sink:
            self.close()
        self._descriptor = descriptor
        self._install(result)

    def _open(self) -> Sink:
        return self._install(self._factory.create(self._descriptor, self._progname, self._formatter))

    def _install(self, result: SinkResult) -> Sink:
        self._sink = result.sink
        self._closed_sink = None
        if result.warning:
            # Issued through the fallback sink, whatever the level
            self._add(Severity.WARN, result.warning, {})
        return result.sink

    def _current_sink(self) -> Sink:
        if self._sink is None:
            return self._open()
        return self._sink

    def close(self) -> None:
        """Release the sink. Logging again reopens the same backend."""
        if self._sink is not None:
            sink, self._sink = self._sink, None
            sink.close()
            self._closed_sink = sink

    @property
    def progname(self) -> str:
        return self._progname

    @progname.setter
    def progname(self, value: str) -> None:
        self._progname = value
        if self._sink is not None and not isinstance(self._sink, LoggerSink):
            self._sink.progname = value

    @property
    def formatter(self) -> LineFormatter:
        return self._formatter

    @formatter.setter
    def formatter(self, formatter: LineFormatter) -> None:
        self._formatter = formatter
        if self._sink is not None and not isinstance(self._sink, LoggerSink):
            self._sink.formatter = formatter

    @property
    def buffer(self) -> str | None:
        """Text logged so far when the backend is the buffer sink, also after close()."""
        sink = self._readable_sink()
        if isinstance(sink, BufferSink):
            return sink.buffer
        return None

    @property
    def records(self) -> tuple[dict[str, Any], ...] | None:
        """Records logged so far when the backend is the document sink, also after close()."""
        sink = self._readable_sink()
        if isinstance(sink, DocumentSink):
            return sink.records
        return None

    def _readable_sink(self) -> Sink | None:
        return self._sink if self._sink is not None else self._closed_sink

    # Levels

    @property
    def level(self) -> Severity:
        return self._level

    @level.setter
    def level(self, value: str | int | Severity) -> None:
        self._level = Severity.parse(value)

    def is_enabled(self, severity: str | int | Severity) -> bool:
        """Whether messages of this severity pass the current threshold."""
        return Severity.parse(severity) >= self._level

    @contextmanager
    def silence(self, temporary_level: str | int | Severity = "error") -> Iterator["StructuredLogger"]:
        """
        Raise the threshold for the duration of the block.

        Does nothing while the process-wide silencer switch is off. The
        previous level is restored on every exit path.

        Example:
            with logger.silence():
                noisy_library_call()
        """
        if not config.silencer_enabled():
            yield self
            return

        old_level = self._level
        self._level = max(old_level, Severity.parse(temporary_level))
        try:
            yield self
        finally:
            self._level = old_level

    # Tokens

    @property
    def token(self) -> str | None:
        """Token prefixed to every message, e.g. a request id."""
        return self._tokens.token

    @token.setter
    def token(self, value: str | None) -> None:
        self._tokens.token = value

    def save_token(self, key: Any) -> None:
        """Remember the current token under an object."""
        self._tokens.save(key)

    def restore_token(self, key: Any) -> None:
        """Restore the token saved under an object; clears it if none was saved."""
        self._tokens.restore(key)

    # Logging

    def _add(self, severity: Severity, msg: Message, attributes: dict[str, Any]) -> bool:
        if callable(msg):
            msg = msg()
            if isinstance(msg, tuple):
                msg, extra = msg
                attributes = {**extra, **attributes}

        if self.log_caller:
            filename, lineno = resolve_caller()
            attributes = {**attributes, "file": filename, "line": lineno}

        message = format_attributes(msg, attributes)

        token = self._tokens.token
        if token is not None:
            message = f"[{token}] {message}"

        self._current_sink().accept(severity, message)
        if self.copy_to_stdout:
            print(message, file=sys.stdout)
        return True

    def debug(self, msg: Message, **attributes: Any) -> bool:
        """Log a debug message."""
        if Severity.DEBUG < self._level:
            return False
        return self._add(Severity.DEBUG, msg, attributes)

    def info(self, msg: Message, **attributes: Any) -> bool:
        """Log an info message."""
        if Severity.INFO < self._level:
            return False
        return self._add(Severity.INFO, msg, attributes)

    def warn(self, msg: Message, **attributes: Any) -> bool:
        """Log a warning message."""
        if Severity.WARN < self._level:
            return False
        return self._add(Severity.WARN, msg, attributes)

    warning = warn

    def error(self, msg: Message, **attributes: Any) -> bool:
        """Log an error message."""
        if Severity.ERROR < self._level:
            return False
        return self._add(Severity.ERROR, msg, attributes)

    def fatal(self, msg: Message, **attributes: Any) -> bool:
        """Log a fatal message."""
        if Severity.FATAL < self._level:
            return False
        return self._add(Severity.FATAL, msg, attributes)

    critical = fatal

    def unknown(self, msg: Message, **attributes: Any) -> bool:
        """Log a message of unknown severity; always passes the gate."""
        if Severity.UNKNOWN < self._level:
            return False
        return self._add(Severity.UNKNOWN, msg, attributes)

    def log(self, severity: str | int | Severity, msg: Message, **attributes: Any) -> bool:
        """
        Log at a specific severity.

        Args:
            severity: Severity, rank or name
            msg: Message or callable producing it
            **attributes: Additional key=value attributes

        Returns:
            True if the message was emitted, False if the level is disabled
        """
        severity = Severity.parse(severity)
        if severity < self._level:
            return False
        return self._add(severity, msg, attributes)

    def exception(self, exc: BaseException, message: str | None = None, **attributes: Any) -> bool:
        """
        Log an exception at FATAL.

        The line reads ``exception class=... reason=... message=... backtrace=...``
        followed by the extra attributes. Frames inside ff_logmux are left
        out of the backtrace; an exception that was never raised has no
        backtrace field. When ``reporter`` is set it is called with the
        exception and the same fields, whatever the level.

        Args:
            exc: The exception to log
            message: Additional reason to log
            **attributes: Additional key=value attributes
        """
        if not isinstance(exc, BaseException):
            return self.fatal(exc, **attributes)

        enabled = Severity.FATAL >= self._level
        if not enabled and self.reporter is None:
            return False

        payload: dict[str, Any] = {
            "class": type(exc).__name__,
            "reason": str(exc),
            "message": message,
        }
        backtrace = format_backtrace(exc)
        if backtrace is not None:
            payload["backtrace"] = backtrace
        payload.update(attributes)

        if enabled:
            self._add(Severity.FATAL, "exception", payload)
        if self.reporter is not None:
            self.reporter(exc, payload)
        return enabled

    def realtime(
        self,
        severity: str | int | Severity,
        msg: Message,
        func: Callable[..., Any],
        *args: Any,
        **attributes: Any,
    ) -> Any:
        """
        Run func(*args), log how long it took and return its result.

        The message gets an ``rt=<seconds>`` attribute. If func raises, the
        exception propagates and nothing is logged.

        Example:
            rows = logger.realtime("info", "query", lambda: db.fetch(sql), table="users")
        """
        severity = Severity.parse(severity)
        start = time.perf_counter()
        result = func(*args)
        elapsed = time.perf_counter() - start

        if severity >= self._level:
            self._add(severity, msg, {**attributes, "rt": f"{elapsed:.3f}"})
        return result

    def clean_trace(self, trace: Iterable[Any] | None) -> list[str]:
        """Drop ff_logmux frames from a backtrace."""
        return clean_trace(trace)

    # File-like interface, e.g. print(..., file=logger) or redirect_stdout(logger)

    def write(self, text: str) -> int:
        """
        Log text at INFO; blank writes are skipped.

        Each call is one message. print() with several arguments writes
        them one by one, so format them into one string first.
        """
        message = text.rstrip("\r\n")
        if message.strip():
            self.info(message)
        return len(text)

    def writelines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        if self._sink is not None:
            self._sink.flush()

    def isatty(self) -> bool:
        return False

    def writable(self) -> bool:
        return True

    @property
    def sync(self) -> bool:
        """Whether the backend flushes on every write."""
        return self._current_sink().sync

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(progname={self._progname!r}, "
            f"level={self._level.name}, backend={self._sink!r})"
        )
