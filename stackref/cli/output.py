"""
Output abstraction for CLI tools.

Provides a testable interface for CLI output, allowing tools to be tested
without capturing stdout.
"""

import sys
from typing import Protocol, TextIO


class OutputWriter(Protocol):
    """Protocol for CLI output writing."""

    def write(self, text: str = "") -> None:
        """Write text with trailing newline."""
        ...

    def write_raw(self, text: str) -> None:
        """Write text without trailing newline."""
        ...

    def flush(self) -> None:
        """Flush pending output."""
        ...


class ConsoleOutput:
    """
    Output writer that writes to a stream (stdout by default).

    Example:
        out = ConsoleOutput()
        out.write("stack.yaml:4:15: error: Unable to find referenced variable, 'B'")
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    @property
    def stream(self) -> TextIO:
        return self._stream

    def write(self, text: str = "") -> None:
        print(text, file=self._stream)

    def write_raw(self, text: str) -> None:
        print(text, end="", file=self._stream)

    def flush(self) -> None:
        self._stream.flush()


class BufferedOutput:
    """
    Output writer that captures output to a list.

    Example:
        out = BufferedOutput()
        out.write("Line 1")
        out.write("Line 2")
        assert out.lines == ["Line 1", "Line 2"]
        assert out.text == "Line 1\\nLine 2\\n"
    """

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._raw_parts: list[str] = []

    def write(self, text: str = "") -> None:
        if self._raw_parts:
            prefix = "".join(self._raw_parts)
            self._raw_parts.clear()
            self._lines.append(prefix + text)
        else:
            self._lines.append(text)

    def write_raw(self, text: str) -> None:
        """Buffer text; complete lines become lines, the rest prefixes the next write."""
        pending = "".join(self._raw_parts) + text
        *complete, rest = pending.split("\n")
        self._lines.extend(complete)
        self._raw_parts = [rest] if rest else []

    def flush(self) -> None:
        if self._raw_parts:
            self._lines.append("".join(self._raw_parts))
            self._raw_parts.clear()

    @property
    def lines(self) -> list[str]:
        return self._lines.copy()

    @property
    def text(self) -> str:
        self.flush()
        return "\n".join(self._lines) + ("\n" if self._lines else "")

    def clear(self) -> None:
        self._lines.clear()
        self._raw_parts.clear()
