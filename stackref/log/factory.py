"""
Factory for creating and configuring loggers.
"""

import logging
import sys
from collections.abc import Mapping
from typing import Any, TextIO

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(config: LogConfig, stream: TextIO | None = None) -> Logger:
        """
        Create the root logger ("/").

        Example:
            >>> config = LogConfig.from_params(level="info", colors=False)
            >>> lg = LoggerFactory.create_root(config)
            >>> lg.info("checking templates", extra={"files": 3})
            [12:34:56,789] [I] checking templates      [files:3] [/]
        """
        return LoggerFactory.create("/", config, stream=stream)

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        extra: Mapping[str, Any] | None = None,
        stream: TextIO | None = None,
    ) -> Logger:
        """
        Create (or reconfigure) a logger writing to stderr.

        Diagnostics go to stdout, so log records default to stderr to keep
        the two apart.

        Args:
            name: Logger name
            config: Logger configuration
            extra: Pre-populated extra fields to include in all log records
            stream: Output stream (defaults to sys.stderr)
        """
        lg = Logger(name, config, extra)
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(LogFormatter(config))
        if config.level is not False:
            handler.setLevel(config.level)
        lg.addHandler(handler)
        lg.propagate = False
        lg.parent = logging.root

        logging.root.manager.loggerDict[name] = lg
        lg.trace2(
            "created logger",
            extra={"level": logging.getLevelName(lg.level), "logger": name},
        )
        return lg

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a child logger that shares the parent's handlers and config.

        Args:
            parent: Parent logger
            tags: Single tag or list of tags appended to the parent's name

        Example:
            >>> analysis_lg = LoggerFactory.derive(root_lg, "analysis")
            >>> analysis_lg.name
            '/analysis'
        """
        parts = [tags] if isinstance(tags, str) else list(tags)
        base = parent.name.rstrip("/")
        name = base + "/" + "/".join(parts)

        lg = Logger(name, parent.config, parent.extra)
        lg.disabled = parent.disabled
        for handler in parent.handlers:
            lg.addHandler(handler)
        lg.propagate = False
        lg.parent = parent
        logging.root.manager.loggerDict[name] = lg
        return lg
