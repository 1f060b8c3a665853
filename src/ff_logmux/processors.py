"""
Custom structlog processors for ff-logmux.

Used by the bridge backend; they can also be added to any other structlog
processor chain so that its output lines up with the bridge's.
"""

import os
from typing import Any

import structlog
from structlog.types import Processor

# structlog method names -> severity labels
_SEVERITY_LABELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warning": "WARN",
    "warn": "WARN",
    "error": "ERROR",
    "exception": "ERROR",
    "critical": "FATAL",
    "fatal": "FATAL",
}


def add_severity(
    logger: Any,
    name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Add the severity label for the structlog method that was called.

    An explicit ``severity`` key is left untouched.

    Args:
        logger: Logger instance
        name: Method name (info, warning, ...)
        event_dict: Event dictionary

    Returns:
        Event dictionary with severity
    """
    if "severity" not in event_dict:
        event_dict["severity"] = _SEVERITY_LABELS.get(name, "ANY")
    return event_dict


class ProgramInfo:
    """
    A structlog processor adding the program name and process id.

    The pid is captured when the processor is created.
    """

    def __init__(self, progname: str):
        self.progname = progname
        self.pid = os.getpid()

    def __call__(self, logger, name, event_dict):
        event_dict.setdefault("progname", self.progname)
        event_dict.setdefault("pid", self.pid)
        return event_dict


def get_renderer(renderer: str) -> Processor:
    """
    Get the final processor for a renderer name.

    Args:
        renderer: One of json, console, logfmt

    Raises:
        ValueError: For unknown renderer names
    """
    renderer = renderer.lower()
    if renderer == "json":
        return structlog.processors.JSONRenderer()
    if renderer == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    if renderer == "logfmt":
        return structlog.processors.LogfmtRenderer()
    raise ValueError(f"Unknown bridge renderer: {renderer}")


def default_processors(program_info: ProgramInfo, renderer: str = "json") -> list[Processor]:
    """Processor chain of the bridge backend."""
    processors = [
        add_severity,
        program_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    # ConsoleRenderer prints the "event" key as the headline
    if renderer.lower() != "console":
        processors.append(structlog.processors.EventRenamer("message"))

    processors.append(get_renderer(renderer))
    return processors
