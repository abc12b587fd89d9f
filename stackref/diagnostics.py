"""
Diagnostics and the per-document diagnostic registry.

Severity values follow the Language Server Protocol numbering so a host
editor can forward diagnostics unchanged.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any

from .position import resolve

DIAGNOSTIC_SOURCE = "stackref"


class Severity(IntEnum):
    """Diagnostic severity."""

    ERROR = 1
    WARNING = 2

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Range:
    """Zero-based, end-exclusive text range."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass(frozen=True)
class Diagnostic:
    """A problem found in a template, located by a single-line range."""

    range: Range
    severity: Severity
    message: str
    source: str = DIAGNOSTIC_SOURCE

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the shape of an LSP diagnostic."""
        return {
            "range": {
                "start": {
                    "line": self.range.start_line,
                    "character": self.range.start_column,
                },
                "end": {
                    "line": self.range.end_line,
                    "character": self.range.end_column,
                },
            },
            "severity": int(self.severity),
            "message": self.message,
            "source": self.source,
        }


def build(
    source: str, offset: int, length: int, severity: Severity, message: str
) -> Diagnostic:
    """
    Build a diagnostic spanning ``length`` characters from ``offset``.

    References never span lines, so the range stays on the start line.

    Args:
        source: Full document text
        offset: Absolute offset of the first highlighted character
        length: Number of highlighted characters
        severity: Diagnostic severity
        message: Message shown to the user
    """
    line, column = resolve(source, offset)
    return Diagnostic(
        range=Range(line, column, line, column + length),
        severity=severity,
        message=message,
    )


def sort_key(diagnostic: Diagnostic) -> tuple[int, int, int]:
    """Order diagnostics by position, then severity."""
    r = diagnostic.range
    return (r.start_line, r.start_column, int(diagnostic.severity))


class DiagnosticRegistry:
    """
    Diagnostics per document, keyed by resolved file path.

    Each analysis pass replaces the whole entry for its document; closing a
    document deletes its entry.

    Example:
        registry = DiagnosticRegistry()
        registry.set(path, diagnostics)
        for path, diagnostics in registry:
            ...
        registry.delete(path)
    """

    def __init__(self) -> None:
        self._entries: dict[Path, tuple[Diagnostic, ...]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(path: Path | str) -> Path:
        return Path(path).resolve()

    def set(self, path: Path | str, diagnostics: list[Diagnostic]) -> None:
        """Replace all diagnostics of a document."""
        with self._lock:
            self._entries[self._key(path)] = tuple(diagnostics)

    def get(self, path: Path | str) -> list[Diagnostic]:
        """Diagnostics of a document (empty if none recorded)."""
        with self._lock:
            return list(self._entries.get(self._key(path), ()))

    def delete(self, path: Path | str) -> None:
        """Forget a document, e.g. when it is closed or removed."""
        with self._lock:
            self._entries.pop(self._key(path), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        with self._lock:
            return self._key(path) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[tuple[Path, list[Diagnostic]]]:
        with self._lock:
            snapshot = list(self._entries.items())
        for path, diagnostics in snapshot:
            yield path, list(diagnostics)
