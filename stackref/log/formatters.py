"""
Log formatter rendering structured extra fields.

Records look like:

    [12:34:56,789] [I] analysis pass complete     [diagnostics:2] [path:a.yaml] [/analysis]
"""

import logging
import traceback
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants

# Attribute carrying the merged extra fields on a record
EXTRA_ATTR = "__stackref__extra"


def _format_value(value: Any) -> str:
    if isinstance(value, BaseException):
        return f"{value.__class__.__name__}: {value}"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(str(v) for v in value)
    return str(value)


def _extra_items(record: logging.LogRecord) -> list[tuple[str, str]]:
    extra = getattr(record, EXTRA_ATTR, None)
    if not extra:
        return []
    return [(key, _format_value(extra[key])) for key in sorted(extra)]


class LogFormatter(logging.Formatter):
    """
    Formatter with per-level colors and ``[key:value]`` extra fields.

    Exceptions passed in ``extra={"exception": e}`` are rendered inline as
    ``ClassName: message``; ``exc_info`` tracebacks follow on new lines.
    """

    def __init__(self, config: LogConfig) -> None:
        super().__init__(datefmt="%H:%M:%S")
        self._config = config

    @property
    def config(self) -> LogConfig:
        return self._config

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        base = super().formatTime(record, datefmt)
        if self._config.micros:
            return f"{base}.{int(record.msecs * 1000):06d}"
        return f"{base},{int(record.msecs):03d}"

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        record.asctime = self.formatTime(record, self.datefmt)
        head = LogConstants.DEFAULT_FORMAT % record.__dict__

        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        pad = " " * max(1, rule - len(head))
        fields = [f"[{key}:{value}]" for key, value in _extra_items(record)]
        fields.append(f"[{record.name}]")
        if self._config.location:
            fields.append(f"[{record.filename}:{record.lineno}]")

        line = head + pad + " ".join(fields)
        if self._config.colors:
            color = ColorManager.get_color_for_level(record.levelno) + "m"
            line = color + line + ColorManager.RESET

        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line
