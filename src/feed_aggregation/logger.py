"""
Logging for feed aggregation, built on loguru.

Console output goes to stderr; a rotating file sink is added when enabled in
the configuration or when a log file is passed explicitly (``-v`` style
verbosity maps onto loguru levels).
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

from feed_aggregation.config import LoggingConfig, get_config

# -v -> DEBUG, -vv (or more) -> TRACE
_VERBOSITY_LEVELS = ["INFO", "DEBUG", "TRACE"]


def level_for_verbosity(verbose: int) -> str:
    """Map a counted -v flag to a log level."""
    return _VERBOSITY_LEVELS[min(max(verbose, 0), len(_VERBOSITY_LEVELS) - 1)]


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: Optional[str] = None,
    retention: Optional[str] = None,
    format: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> None:
    """Replace all loguru sinks with the configured ones.

    Explicit arguments win over the logging configuration.

    Args:
        level: Log level (TRACE, DEBUG, INFO, WARNING, ...)
        log_file: Path to a log file; turns on file logging
        rotation: File rotation setting (e.g. "100 MB", "1 day")
        retention: File retention setting (e.g. "30 days")
        format: loguru format string
        config: Logging configuration (defaults to the global config)
    """
    config = config or get_config().logging

    level = level or config.level
    format = format or config.format

    _logger.remove()

    if config.console_enabled:
        _logger.add(
            sys.stderr,
            format=format,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    if log_file is None and config.file_enabled:
        log_file = config.file_path

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            log_file,
            format=format,
            level=level,
            rotation=rotation or config.rotation,
            retention=retention or config.retention,
            compression="zip",
            encoding="utf-8",
            enqueue=True,  # Fetch threads log concurrently
            backtrace=True,
            diagnose=False,
        )


def get_logger(name: Optional[str] = None):
    """Get a logger bound to ``name`` (typically ``__name__``)."""
    if name:
        return _logger.bind(name=name)
    return _logger


logger = _logger

__all__ = [
    "setup_logger",
    "get_logger",
    "level_for_verbosity",
    "logger",
]
