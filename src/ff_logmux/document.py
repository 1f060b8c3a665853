"""
In-memory sink keeping one structured document per log call.
"""

import time
from typing import Any

from .formatter import LineFormatter
from .severity import Severity
from .sinks import Sink


class DocumentSink(Sink):
    """
    Stores every message as a dict instead of a text line.

    Each record has the shape::

        {**attrs, "severity": Severity, "time": float, "progname": str, "message": str}

    ``attrs`` are extra fields merged into every record. On a key collision
    the fixed fields win, so attrs can never hide the severity, time,
    program name or message.

    Example:
        sink = DocumentSink(progname="worker")
        sink.attrs = {"txid": 1234}
        sink.accept(Severity.INFO, "started")
        sink.records[-1]["txid"]  # 1234
    """

    sync = False

    def __init__(
        self,
        progname: str = "",
        formatter: LineFormatter | None = None,
        attrs: dict[str, Any] | None = None,
    ):
        super().__init__(progname=progname, formatter=formatter)
        self.attrs: dict[str, Any] = dict(attrs or {})
        self._records: list[dict[str, Any]] = []

    def accept(self, severity: Severity, message: str) -> None:
        self._records.append(
            {
                **self.attrs,
                "severity": severity,
                "time": time.time(),
                "progname": self.progname,
                "message": message,
            }
        )

    @property
    def records(self) -> tuple[dict[str, Any], ...]:
        """All records in the order they were logged."""
        return tuple(self._records)

    def clear(self) -> None:
        """Drop all records."""
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
