"""
Immutable logger configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .constants import LogConstants
from .exceptions import InvalidLogLevelError

if TYPE_CHECKING:
    from ..config.schemas import LoggingConfig


def _resolve_level(level: str | int | bool) -> int | bool:
    """Resolve a level name, number or bool to an int or False."""
    if isinstance(level, bool):
        return logging.INFO if level else False
    if isinstance(level, int):
        return level
    if level.isnumeric():
        return int(level)
    name = level.lower()
    if name in LogConstants.LEVEL_NAMES:
        return LogConstants.LEVEL_NAMES[name]
    raise InvalidLogLevelError(level)


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable configuration for loggers.

    ``level`` is False when logging is disabled entirely.
    """

    level: int | bool = logging.INFO
    location: int = 0
    micros: bool = False
    colors: bool = True

    @classmethod
    def from_params(
        cls,
        level: str | int | bool,
        location: bool | int = 0,
        micros: bool = False,
        colors: bool = True,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (string name, numeric value, or False to disable logging)
            location: Location display level (bool or int)
            micros: Whether to show microsecond precision
            colors: Whether to enable colored output
        """
        resolved_location = (
            1 if location is True else (0 if location is False else int(location))
        )
        return cls(
            level=_resolve_level(level),
            location=resolved_location,
            micros=micros,
            colors=colors,
        )

    @classmethod
    def from_config(cls, section: LoggingConfig | dict[str, Any]) -> LogConfig:
        """
        Create LogConfig from the ``logging`` configuration section.

        Example:
            config = load_config()
            log_config = LogConfig.from_config(config.logging)
        """
        values = section if isinstance(section, dict) else section.model_dump()
        return cls.from_params(
            level=values.get("level", "warning"),
            location=values.get("location", 0),
            micros=values.get("micros", False),
            colors=values.get("colors", True),
        )
