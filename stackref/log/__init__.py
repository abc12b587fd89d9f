"""
Logging with custom trace levels, colored output and structured extra fields.

This module extends Python's standard logging with:
- Custom TRACE and TRACE2 log levels for detailed debugging
- Colored console output with ANSI escape sequences
- Structured extra fields rendered as [key:value]
- Hierarchical "/"-named loggers derived from a root logger
- Complete logging disable functionality (level=False or level="false")
"""

import logging

from .config import LogConfig
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter
from .logger import Logger

logging.TRACE = LogConstants.CUSTOM_LEVELS["TRACE"]  # type: ignore[attr-defined]
logging.addLevelName(logging.TRACE, "TRACE")  # type: ignore[attr-defined]

logging.TRACE2 = LogConstants.CUSTOM_LEVELS["TRACE2"]  # type: ignore[attr-defined]
logging.addLevelName(logging.TRACE2, "TRACE2")  # type: ignore[attr-defined]


def resolve_level(s: str | int | bool) -> int | bool:
    """
    Resolve log level from string, numeric value, or boolean.

    Raises:
        InvalidLogLevelError: If the log level is invalid
    """
    return LogConfig.from_params(s).level


def create_root_lg(
    level: str | int | bool = "warning",
    location: bool | int = False,
    micros: bool = False,
    colors: bool = True,
) -> Logger:
    """
    Create the root logger with the specified configuration.

    Example:
        >>> lg = create_root_lg("debug", colors=False)
    """
    config = LogConfig.from_params(level, location, micros, colors)
    return LoggerFactory.create_root(config)


def derive_lg(lg: Logger, tags: str | list[str]) -> Logger:
    """
    Derive a logger with tags from a parent logger.

    Example:
        >>> parent_lg = create_root_lg("info")
        >>> child_lg = derive_lg(parent_lg, "analysis")
    """
    return LoggerFactory.derive(lg, tags)


def null_lg() -> Logger:
    """Logger with logging disabled, used when no logger is supplied."""
    existing = logging.root.manager.loggerDict.get("/null")
    if isinstance(existing, Logger):
        return existing
    return LoggerFactory.create("/null", LogConfig(level=False))


__all__ = [
    "Logger",
    "LogConfig",
    "LogConstants",
    "LogFormatter",
    "LoggerFactory",
    "LogError",
    "InvalidLogLevelError",
    "resolve_level",
    "create_root_lg",
    "derive_lg",
    "null_lg",
]
