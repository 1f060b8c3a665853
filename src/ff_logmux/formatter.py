"""
Line and attribute formatting.
"""

import logging
import re
from datetime import datetime
from typing import Any

from . import config
from .severity import Severity

_NEEDS_QUOTES = re.compile(r'[\s"]')


def clean_quote(value: Any) -> str:
    """
    Render an attribute value for key=value output.

    Values containing whitespace or double quotes are wrapped in double
    quotes, with inner double quotes turned into single quotes. This is
    approximate on purpose and cannot be reversed.
    """
    text = "" if value is None else str(value)
    if _NEEDS_QUOTES.search(text):
        return '"' + text.replace('"', "'") + '"'
    return text


def format_attributes(message: Any, attributes: dict[str, Any] | None = None) -> str:
    """
    Append attributes to a message as key=value pairs.

    Example:
        format_attributes("foo", {"key": "value", "test": "with space"})
        # 'foo key=value test="with space"'
    """
    text = "" if message is None else str(message)
    if not attributes:
        return text

    pairs = " ".join(f"{key}={clean_quote(value)}" for key, value in attributes.items())
    return f"{text} {pairs}" if text else pairs


class LineFormatter(logging.Formatter):
    """
    Renders one log line: time, program name, pid, severity and message.

    The template and time format default to the process-wide settings and
    are looked up on every call, so configure_logging() affects existing
    formatters. Passing them explicitly pins them for this instance.
    """

    def __init__(self, template: str | None = None, time_format: str | None = None):
        super().__init__()
        self.template = template
        self.time_format = time_format

    def render(
        self,
        severity: Severity,
        timestamp: datetime,
        progname: str,
        pid: int,
        message: Any,
    ) -> str:
        template = self.template or config.get_setting("format")
        return template % (
            self.format_time(timestamp),
            progname,
            pid,
            severity.label,
            "" if message is None else str(message),
        )

    def format_time(self, timestamp: datetime) -> str:
        time_format = self.time_format or config.get_setting("time_format")
        return timestamp.strftime(time_format)

    def format(self, record: logging.LogRecord) -> str:
        return self.render(
            getattr(record, "severity", Severity.UNKNOWN),
            datetime.fromtimestamp(record.created),
            getattr(record, "progname", record.name),
            getattr(record, "pid", record.process),
            record.getMessage(),
        )

    def __repr__(self) -> str:
        return f"LineFormatter(template={self.template!r}, time_format={self.time_format!r})"


class SyslogFormatter(logging.Formatter):
    """Formatter for syslog; the daemon adds time, host and ident itself."""

    def format(self, record: logging.LogRecord) -> str:
        severity = getattr(record, "severity", Severity.UNKNOWN)
        return f"[{severity.label}] {record.getMessage()}"
