"""
Severity levels and level parsing.
"""

import logging
from enum import IntEnum
from typing import Any

from .exceptions import InvalidLevelError


class Severity(IntEnum):
    """
    Ordered message severities.

    Ranks are stable: a logger at level L emits only severities >= L.
    """

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    UNKNOWN = 5

    @property
    def label(self) -> str:
        """Text written between brackets in line output."""
        return "ANY" if self is Severity.UNKNOWN else self.name

    @property
    def stdlib_level(self) -> int:
        """Equivalent level of the standard library logging package."""
        return _STDLIB_LEVELS[self]

    @property
    def method_name(self) -> str:
        """Name of the structlog method used to emit this severity."""
        return _METHOD_NAMES[self]

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """
        Resolve a severity from a Severity, an integer rank or a name.

        Args:
            value: Severity, rank (0-5) or case-insensitive name

        Returns:
            The matching Severity

        Raises:
            InvalidLevelError: If the value matches no severity
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise InvalidLevelError(value) from None

        if isinstance(value, str):
            severity = _NAMES.get(value.strip().lower())
            if severity is not None:
                return severity

        raise InvalidLevelError(value)


_STDLIB_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
    Severity.UNKNOWN: logging.CRITICAL,
}

_METHOD_NAMES = {
    Severity.DEBUG: "debug",
    Severity.INFO: "info",
    Severity.WARN: "warning",
    Severity.ERROR: "error",
    Severity.FATAL: "critical",
    Severity.UNKNOWN: "critical",
}

# Accepted names, including aliases used by the stdlib and structlog
_NAMES = {severity.name.lower(): severity for severity in Severity}
_NAMES.update(
    {
        "warning": Severity.WARN,
        "critical": Severity.FATAL,
        "any": Severity.UNKNOWN,
    }
)
