"""
Configuration system for ff-logmux.

Supports environment variables, config files, and programmatic configuration.
Settings are process-wide; loggers read them when they are created, except
for the silencer switch and the line format templates, which are read on
every use.
"""

import json
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from .severity import Severity

DEFAULT_FORMAT = "%s %s(%d) [%s] %s\n"
DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

_DEFAULTS: dict[str, Any] = {
    "level": "DEBUG",
    "backend": "stderr",
    "format": DEFAULT_FORMAT,
    "time_format": DEFAULT_TIME_FORMAT,
    "silencer": True,
    "log_caller": False,
    "syslog_address": "/dev/log",
    "syslog_facility": "local1",
    "bridge_renderer": "json",
}

# Global configuration
_GLOBAL_CONFIG: dict[str, Any] = dict(_DEFAULTS)

# Process-wide logger instance, created on first use
_default_logger = None


def configure_logging(
    level: str | int | None = None,
    backend: Any = None,
    format: str | None = None,
    time_format: str | None = None,
    silencer: bool | None = None,
    log_caller: bool | None = None,
    syslog_address: str | None = None,
    bridge_renderer: str | None = None,
    config_file: str | Path | None = None,
    use_env: bool = True,
) -> None:
    """
    Configure global logging settings.

    Args:
        level: Default threshold for new loggers (name or rank)
        backend: Default backend descriptor for new loggers
        format: Line template with five %-placeholders
            (time, progname, pid, severity, message)
        time_format: strftime format for line timestamps
        silencer: Whether silence() raises the level at all
        log_caller: Default caller attribution flag for new loggers
        syslog_address: Unix socket path of the syslog daemon
        bridge_renderer: Renderer of the structlog bridge (json, console)
        config_file: Path to JSON config file
        use_env: Whether to read from environment variables

    Raises:
        InvalidLevelError: If the resulting level is not a known severity
    """
    # Load from config file if provided
    if config_file:
        config_path = Path(config_file)
        if config_path.exists():
            with open(config_path) as f:
                file_config = json.load(f)
                _GLOBAL_CONFIG.update(file_config)

    # Load from environment variables if enabled
    if use_env:
        env_config = _load_env_config()
        _GLOBAL_CONFIG.update(env_config)

    # Apply explicit arguments (highest priority)
    if level is not None:
        _GLOBAL_CONFIG["level"] = level
    if backend is not None:
        _GLOBAL_CONFIG["backend"] = backend
    if format is not None:
        _GLOBAL_CONFIG["format"] = format
    if time_format is not None:
        _GLOBAL_CONFIG["time_format"] = time_format
    if silencer is not None:
        _GLOBAL_CONFIG["silencer"] = silencer
    if log_caller is not None:
        _GLOBAL_CONFIG["log_caller"] = log_caller
    if syslog_address is not None:
        _GLOBAL_CONFIG["syslog_address"] = syslog_address
    if bridge_renderer is not None:
        _GLOBAL_CONFIG["bridge_renderer"] = bridge_renderer.lower()

    # Normalize so a bad level fails here rather than in the next logger
    _GLOBAL_CONFIG["level"] = Severity.parse(_GLOBAL_CONFIG["level"]).name


def _load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config = {}

    # FF_LOGMUX_LEVEL
    if level := os.getenv("FF_LOGMUX_LEVEL"):
        config["level"] = level.upper()

    # FF_LOGMUX_BACKEND
    if backend := os.getenv("FF_LOGMUX_BACKEND"):
        config["backend"] = backend

    # FF_LOGMUX_FORMAT
    if format := os.getenv("FF_LOGMUX_FORMAT"):
        config["format"] = format

    # FF_LOGMUX_TIME_FORMAT
    if time_format := os.getenv("FF_LOGMUX_TIME_FORMAT"):
        config["time_format"] = time_format

    # FF_LOGMUX_SILENCER
    if silencer := os.getenv("FF_LOGMUX_SILENCER"):
        config["silencer"] = silencer.lower() in ("true", "1", "yes")

    # FF_LOGMUX_LOG_CALLER
    if log_caller := os.getenv("FF_LOGMUX_LOG_CALLER"):
        config["log_caller"] = log_caller.lower() in ("true", "1", "yes")

    # FF_LOGMUX_SYSLOG_ADDRESS
    if syslog_address := os.getenv("FF_LOGMUX_SYSLOG_ADDRESS"):
        config["syslog_address"] = syslog_address

    # FF_LOGMUX_BRIDGE_RENDERER
    if renderer := os.getenv("FF_LOGMUX_BRIDGE_RENDERER"):
        config["bridge_renderer"] = renderer.lower()

    return config


def get_config() -> dict[str, Any]:
    """Get current global configuration."""
    return _GLOBAL_CONFIG.copy()


def get_setting(key: str) -> Any:
    """Get a single configuration value."""
    return _GLOBAL_CONFIG[key]


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _default_logger
    _GLOBAL_CONFIG.clear()
    _GLOBAL_CONFIG.update(_DEFAULTS)
    _default_logger = None


def silencer_enabled() -> bool:
    """Whether StructuredLogger.silence() currently raises the level."""
    return bool(_GLOBAL_CONFIG["silencer"])


def set_silencer(enabled: bool) -> None:
    """Turn the process-wide silencer switch on or off."""
    _GLOBAL_CONFIG["silencer"] = enabled


@contextmanager
def silencer(enabled: bool) -> Iterator[None]:
    """
    Set the silencer switch for the duration of the block.

    The previous value is restored on every exit path.

    Example:
        with silencer(False):
            with logger.silence():
                logger.info("still logged")
    """
    previous = _GLOBAL_CONFIG["silencer"]
    _GLOBAL_CONFIG["silencer"] = enabled
    try:
        yield
    finally:
        _GLOBAL_CONFIG["silencer"] = previous


def get_logger(progname: str | None = None, backend: Any = None, **kwargs: Any):
    """
    Get a logger instance based on configuration.

    Args:
        progname: Program name written in every line
        backend: Override backend descriptor (default: configured backend)
        **kwargs: Additional arguments for the StructuredLogger constructor

    Returns:
        StructuredLogger instance

    Example:
        # Uses global config
        logger = get_logger("my_service")

        # Override backend
        logger = get_logger("my_service", backend="/var/log/my_service.log")
    """
    from .logger import StructuredLogger

    return StructuredLogger(backend, progname, **kwargs)


def get_default_logger():
    """Get the process-wide logger, creating it from configuration if needed."""
    global _default_logger
    if _default_logger is None:
        _default_logger = get_logger()
    return _default_logger


def set_default_logger(logger) -> None:
    """Replace the process-wide logger."""
    global _default_logger
    _default_logger = logger
