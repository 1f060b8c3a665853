"""
MultiLogger: fan logging calls out to several loggers.
"""

import time
from collections.abc import Callable, Iterator
from contextlib import ExitStack, contextmanager
from typing import Any

from .logger import StructuredLogger
from .severity import Severity


class MultiLogger:
    """
    Multiplexes StructuredLogger objects.

    Any call not defined here is forwarded to every attached logger in
    attachment order, and the first logger's result is returned. Callers
    should rely on the side effects only. Attribute assignments such as
    ``multi.level = "info"`` are applied to every logger.

    The loggers are referenced, not owned: detaching or dropping the
    MultiLogger does not close them.

    Example:
        multi = MultiLogger(StructuredLogger())
        multi.attach(StructuredLogger("/var/log/app.log"))
        multi.info("written to stderr and the file")
    """

    def __init__(self, *loggers: StructuredLogger):
        object.__setattr__(self, "_loggers", list(loggers))

    @property
    def loggers(self) -> tuple[StructuredLogger, ...]:
        return tuple(self._loggers)

    def attach(self, logger: StructuredLogger) -> StructuredLogger:
        """
        Attach a logger.

        The token of the first attached logger is copied to the new one so
        it joins the current transaction.
        """
        if self._loggers:
            logger.token = self._loggers[0].token
        self._loggers.append(logger)
        return logger

    def detach(self, logger: StructuredLogger) -> None:
        """Detach a logger; no-op if it is not attached."""
        self._loggers[:] = [attached for attached in self._loggers if attached is not logger]

    @contextmanager
    def silence(self, temporary_level: str | int | Severity = "error") -> Iterator["MultiLogger"]:
        """Silence every attached logger for the duration of the block."""
        with ExitStack() as stack:
            for logger in list(self._loggers):
                stack.enter_context(logger.silence(temporary_level))
            yield self

    def realtime(
        self,
        severity: str | int | Severity,
        msg: Any,
        func: Callable[..., Any],
        *args: Any,
        **attributes: Any,
    ) -> Any:
        """Run func(*args) once and log its duration through every attached logger."""
        severity = Severity.parse(severity)
        start = time.perf_counter()
        result = func(*args)
        elapsed = time.perf_counter() - start

        for logger in list(self._loggers):
            logger.log(severity, msg, **{**attributes, "rt": f"{elapsed:.3f}"})
        return result

    def _forward(self, name: str) -> Callable[..., Any]:
        def forward(*args: Any, **kwargs: Any) -> Any:
            results = [getattr(logger, name)(*args, **kwargs) for logger in list(self._loggers)]
            return results[0] if results else None

        forward.__name__ = name
        return forward

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined on MultiLogger
        if name.startswith("_"):
            raise AttributeError(name)

        template = type(self._loggers[0]) if self._loggers else StructuredLogger
        member = getattr(template, name, None)

        if isinstance(member, property):
            return getattr(self._loggers[0], name) if self._loggers else None
        if callable(member):
            return self._forward(name)
        if self._loggers and hasattr(self._loggers[0], name):
            return getattr(self._loggers[0], name)

        raise AttributeError(f"{self.__class__.__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        for logger in self._loggers:
            setattr(logger, name, value)

    def __len__(self) -> int:
        return len(self._loggers)

    def __iter__(self) -> Iterator[StructuredLogger]:
        return iter(list(self._loggers))

    def __repr__(self) -> str:
        return f"MultiLogger({self._loggers!r})"
