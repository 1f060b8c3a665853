"""
Caller attribution and backtrace cleaning.

Frames that belong to this package are skipped so that attribution and
backtraces point at application code.
"""

import inspect
import os
import traceback
from collections.abc import Iterable, Iterator
from types import FrameType
from typing import Any

LIBRARY_ROOT = os.path.dirname(os.path.abspath(__file__))

UNKNOWN_CALLER = ("unknown", 0)


def is_library_file(filename: str) -> bool:
    """Whether a source file belongs to the ff_logmux package."""
    return os.path.abspath(filename).startswith(LIBRARY_ROOT + os.sep)


def iter_stack(frame: FrameType | None) -> Iterator[tuple[str, int]]:
    """Yield (file, line) pairs from a frame outwards."""
    while frame is not None:
        yield frame.f_code.co_filename, frame.f_lineno
        frame = frame.f_back


def find_caller(frames: Iterable[tuple[str, int]]) -> tuple[str, int]:
    """
    Return the first frame that is not library code.

    Args:
        frames: (file, line) pairs, innermost first

    Returns:
        (file, line) of the first application frame, or UNKNOWN_CALLER
    """
    for filename, lineno in frames:
        if not is_library_file(filename):
            return filename, lineno
    return UNKNOWN_CALLER


def resolve_caller() -> tuple[str, int]:
    """Attribute the current call to the nearest application frame."""
    frame = inspect.currentframe()
    try:
        return find_caller(iter_stack(frame))
    finally:
        del frame


def _frame_text(frame: Any) -> str:
    if isinstance(frame, traceback.FrameSummary):
        return f"{frame.filename}:{frame.lineno} in {frame.name}"
    return str(frame)


def _frame_file(frame: Any) -> str:
    if isinstance(frame, traceback.FrameSummary):
        return frame.filename
    # "path/to/file.py:12 in func"
    return str(frame).rsplit(":", 1)[0] if ":" in str(frame) else str(frame)


def clean_trace(trace: Iterable[Any] | None) -> list[str]:
    """
    Drop library frames from a backtrace.

    Args:
        trace: FrameSummary objects or "file:line in name" strings

    Returns:
        Remaining frames as strings, outermost first
    """
    if not trace:
        return []
    return [_frame_text(frame) for frame in trace if not is_library_file(_frame_file(frame))]


def format_backtrace(exc: BaseException) -> list[str] | None:
    """Cleaned backtrace of an exception, or None if it was never raised."""
    tb = getattr(exc, "__traceback__", None)
    if tb is None:
        return None
    return clean_trace(traceback.extract_tb(tb))
