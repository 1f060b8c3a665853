"""
Custom exceptions for the ff-logmux package.
"""

from typing import Any


class LoggingError(Exception):
    """Base exception for all ff-logmux errors."""

    pass


class UnknownBackendError(LoggingError):
    """Raised when a backend descriptor matches no known sink."""

    def __init__(self, descriptor: Any, known_backends: list | None = None):
        self.descriptor = descriptor
        self.known_backends = known_backends or []

        if known_backends:
            message = (
                f"Unknown logging backend: {descriptor!r}. "
                f"Known backends: {', '.join(known_backends)}"
            )
        else:
            message = f"Unknown logging backend: {descriptor!r}"

        super().__init__(message)


class InvalidLevelError(LoggingError, ValueError):
    """Raised when a level is neither a severity name nor a known rank."""

    def __init__(self, level: Any):
        self.level = level
        super().__init__(f"Invalid log level: {level!r}")


class BackendUnavailableError(LoggingError):
    """Raised when an optional backend cannot be set up in this environment."""

    def __init__(self, backend: str, reason: str | None = None):
        self.backend = backend
        self.reason = reason

        message = f"Backend '{backend}' is unavailable"
        if reason:
            message = f"{message}: {reason}"

        super().__init__(message)


class DestinationUnwritableError(LoggingError):
    """Raised when a log file cannot be created or opened for writing."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        self.reason = reason

        message = f"{path} not writable"
        if reason:
            message = f"{message}: {reason}"

        super().__init__(message)
