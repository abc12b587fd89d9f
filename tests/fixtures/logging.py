"""
Logging fixtures for testing.

Provides fixtures for loggers writing to an in-memory stream.
"""

import logging
from collections.abc import Callable, Generator
from io import StringIO

import pytest

from stackref.log import LogConfig, Logger, LoggerFactory


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """
    Reset Python logging global state before and after each test.

    This prevents test pollution from loggers created by previous tests.
    Resets: loggerDict, root handlers, root level, and logger class.
    """
    original_class = logging.getLoggerClass()
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    yield

    logging.setLoggerClass(original_class)

    for name in list(logging.root.manager.loggerDict.keys()):
        if name.startswith("/") or name.startswith("test"):
            del logging.root.manager.loggerDict[name]

    logging.root.handlers = original_handlers
    logging.root.setLevel(original_level)


@pytest.fixture
def log_stream() -> StringIO:
    """Stream that captured loggers write to."""
    return StringIO()


@pytest.fixture
def make_logger(log_stream: StringIO) -> Callable[..., Logger]:
    """
    Factory for loggers writing uncolored records to ``log_stream``.

    Example:
        lg = make_logger("debug")
        lg.debug("hello")
        assert "hello" in log_stream.getvalue()
    """

    def _make(level: str = "trace2", name: str = "/") -> Logger:
        config = LogConfig.from_params(level, colors=False)
        return LoggerFactory.create(name, config, stream=log_stream)

    return _make
