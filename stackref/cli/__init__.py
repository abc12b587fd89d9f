"""Command-line interface: check, watch and version subcommands."""

from .output import BufferedOutput, ConsoleOutput, OutputWriter
from .render import DiagnosticRenderer, format_text

__all__ = [
    "OutputWriter",
    "ConsoleOutput",
    "BufferedOutput",
    "DiagnosticRenderer",
    "format_text",
]
