"""
Bridge backend handing messages to structlog.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import Processor

from . import config
from .formatter import LineFormatter
from .processors import ProgramInfo, default_processors
from .severity import Severity
from .sinks import Sink


class BridgeSink(Sink):
    """
    A sink that logs through a structlog bound logger.

    Messages arrive already rendered (attributes, token and caller are part
    of the text); structlog adds severity, program info and a timestamp and
    renders the event as JSON, console or logfmt output.
    """

    def __init__(
        self,
        progname: str = "",
        formatter: LineFormatter | None = None,
        stream: TextIO | None = None,
        renderer: str | None = None,
        processors: list[Processor] | None = None,
    ):
        """
        Initialize a bridge sink.

        Args:
            progname: Program name added to every event
            formatter: Kept for interface parity; structlog renders the output
            stream: Output stream (default: sys.stderr)
            renderer: json, console or logfmt (default: configured renderer)
            processors: Full processor chain replacing the default one
        """
        self._program_info = ProgramInfo(progname)
        self.stream = stream or sys.stderr
        self.renderer = renderer or config.get_setting("bridge_renderer")

        super().__init__(progname=progname, formatter=formatter)

        if processors is None:
            processors = default_processors(self._program_info, self.renderer)

        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(file=self.stream),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            cache_logger_on_first_use=True,
        )

    @property
    def progname(self) -> str:
        return self._program_info.progname

    @progname.setter
    def progname(self, value: str) -> None:
        self._program_info.progname = value

    @property
    def logger(self) -> Any:
        """The underlying structlog bound logger."""
        return self._logger

    def accept(self, severity: Severity, message: str) -> None:
        getattr(self._logger, severity.method_name)(message, severity=severity.label)

    def flush(self) -> None:
        if hasattr(self.stream, "flush"):
            self.stream.flush()

    def __repr__(self) -> str:
        return f"BridgeSink(progname={self.progname!r}, renderer={self.renderer!r})"
