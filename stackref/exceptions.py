"""
Unified exception hierarchy for stackref.

Only failures that stop an analysis pass are raised. Anything recoverable
(an unresolved name, a child template that cannot be read) is reported as a
diagnostic instead.
"""

from pathlib import Path
from typing import Any


class StackRefError(Exception):
    """
    Base exception for all stackref errors.

    Example:
        try:
            analyzer.analyze_file(path)
        except StackRefError as e:
            lg.error("analysis failed", extra={"exception": e})
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(StackRefError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found or not valid YAML
        - Value rejected by the configuration schema
    """

    pass


class TemplateError(StackRefError):
    """Base class for template loading and parsing failures."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.line = line
        self.column = column

    def format_location(self) -> str:
        """Format file and position for error messages (1-based)."""
        parts = []
        if self.path:
            parts.append(f"in '{self.path}'")
        if self.line is not None:
            parts.append(f"line {self.line + 1}")
        if self.column is not None:
            parts.append(f"column {self.column + 1}")
        return ", ".join(parts) if parts else "unknown location"

    def __str__(self) -> str:
        if self.path is None and self.line is None:
            return self.message
        return f"{self.message} ({self.format_location()})"


class TemplateParseError(TemplateError):
    """
    The template text is not a usable YAML mapping.

    Raised for syntax errors, multi-document streams, recursive aliases and
    documents whose root is not a mapping.
    """

    pass


class TemplateLoadError(TemplateError):
    """A template file could not be read from disk."""

    pass


class ToolError(StackRefError):
    """
    CLI tool errors.

    Examples:
        - Path given on the command line does not exist
        - Unknown output format
    """

    pass
