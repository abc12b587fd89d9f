"""
Absolute offset to (line, column) conversion.

PyYAML marks carry line and column too, but diagnostics point inside a node
(past a tag, inside a placeholder), so positions are recomputed from the
absolute character offset of the referenced text.
"""

import re
from typing import NamedTuple

_LINE_BREAK = re.compile(r"\r?\n")


class Position(NamedTuple):
    """Zero-based line and column."""

    line: int
    column: int


def resolve(source: str, offset: int) -> Position:
    """
    Convert an absolute character offset into a zero-based position.

    Args:
        source: Full document text (``\\n`` or ``\\r\\n`` line endings)
        offset: Absolute offset into ``source``

    Returns:
        Position of the character at ``offset``
    """
    matches = list(_LINE_BREAK.finditer(source, 0, offset))
    if not matches:
        # First line, no terminator before the offset
        return Position(0, offset)

    line_start = matches[-1].end()
    return Position(len(matches), offset - line_start)
