"""
ANSI color selection for log output.
"""

import logging

from .constants import LogConstants


class ColorManager:
    """Centralized ANSI color code management."""

    RED = "\x1b[31"
    GREEN = "\x1b[32"
    YELLOW = "\x1b[33"
    MAGENTA = "\x1b[35"
    CYAN = "\x1b[36"
    DEFAULT = "\x1b[38"

    RESET = LogConstants.RESET

    COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[38;5;32",
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: MAGENTA,
    }

    @staticmethod
    def create_gray_level(level: int) -> str:
        """Create a gray color (0-23) for trace levels."""
        level = max(0, min(level, LogConstants.GRAY_MAX_LEVELS - 1))
        return f"\x1b[38;5;{LogConstants.GRAY_BASE + level}"

    @staticmethod
    def get_color_for_level(level: int) -> str:
        """Color escape sequence (without the trailing 'm') for a log level."""
        if level in ColorManager.COLORS:
            return ColorManager.COLORS[level]
        if level < logging.DEBUG:
            # TRACE and TRACE2 fade to gray
            return ColorManager.create_gray_level(12 + level)
        return ColorManager.DEFAULT
