"""
Diagnostic rendering for the CLI.

Three formats:
- text: ``path:line:column: severity: message`` (1-based, one per line)
- json: LSP-shaped diagnostics grouped by file
- pretty: rich output with the offending source line underlined
"""

from __future__ import annotations

import io
import json
from pathlib import Path

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

from ..diagnostics import Diagnostic, Severity, sort_key
from .output import OutputWriter

FORMATS = ("text", "json", "pretty")

STACKREF_THEME = {
    "error": "red bold",
    "warning": "yellow bold",
    "path": "bold",
    "muted": "dim",
    "marker": "red",
}

_SEVERITY_STYLE = {Severity.ERROR: "error", Severity.WARNING: "warning"}


def _display_path(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


def format_text(path: Path, diagnostic: Diagnostic) -> str:
    """Single-line compiler-style rendering."""
    r = diagnostic.range
    return (
        f"{_display_path(path)}:{r.start_line + 1}:{r.start_column + 1}: "
        f"{diagnostic.severity.label}: {diagnostic.message}"
    )


class DiagnosticRenderer:
    """Writes diagnostics of one or more documents in the chosen format."""

    def __init__(self, out: OutputWriter, fmt: str = "text", color: bool = True) -> None:
        if fmt not in FORMATS:
            raise ValueError(f"unknown output format '{fmt}'")
        self._out = out
        self._format = fmt
        self._color = color

    def render(self, results: list[tuple[Path, list[Diagnostic]]]) -> None:
        if self._format == "json":
            self._render_json(results)
            return
        for path, diagnostics in results:
            ordered = sorted(diagnostics, key=sort_key)
            if self._format == "pretty":
                self._render_pretty(path, ordered)
            else:
                for diagnostic in ordered:
                    self._out.write(format_text(path, diagnostic))

    def render_summary(self, results: list[tuple[Path, list[Diagnostic]]]) -> None:
        """One closing line with totals (text and pretty formats only)."""
        if self._format == "json":
            return
        errors = sum(1 for _, ds in results for d in ds if d.is_error)
        warnings = sum(1 for _, ds in results for d in ds if not d.is_error)
        files = len(results)
        self._out.write(
            f"{files} file{'s' if files != 1 else ''} checked: "
            f"{errors} error{'s' if errors != 1 else ''}, "
            f"{warnings} warning{'s' if warnings != 1 else ''}"
        )

    def _render_json(self, results: list[tuple[Path, list[Diagnostic]]]) -> None:
        payload = [
            {
                "path": str(path),
                "diagnostics": [d.to_dict() for d in sorted(ds, key=sort_key)],
            }
            for path, ds in results
        ]
        self._out.write(json.dumps(payload, indent=2))

    def _render_pretty(self, path: Path, diagnostics: list[Diagnostic]) -> None:
        if not diagnostics:
            return
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            theme=Theme(STACKREF_THEME),
            no_color=not self._color,
            force_terminal=self._color,
            width=120,
            highlight=False,
        )
        lines = _read_lines(path)
        for diagnostic in diagnostics:
            console.print(_headline(path, diagnostic))
            line_no = diagnostic.range.start_line
            if line_no < len(lines):
                console.print(_snippet(lines[line_no], line_no, diagnostic))
        self._out.write_raw(buffer.getvalue())


def _read_lines(path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return []


def _headline(path: Path, diagnostic: Diagnostic) -> Text:
    r = diagnostic.range
    style = _SEVERITY_STYLE[diagnostic.severity]
    text = Text()
    text.append(f"{_display_path(path)}:{r.start_line + 1}:{r.start_column + 1}", "path")
    text.append(" ")
    text.append(diagnostic.severity.label, style)
    text.append(f": {diagnostic.message}")
    return text


def _snippet(line: str, line_no: int, diagnostic: Diagnostic) -> Text:
    r = diagnostic.range
    gutter = f"{line_no + 1:>5} | "
    text = Text(gutter, "muted")
    text.append(line)
    text.append("\n" + " " * (len(gutter) + r.start_column))
    text.append("^" * max(1, r.end_column - r.start_column), "marker")
    return text
