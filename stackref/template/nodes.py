"""
Position-carrying template nodes.

A parsed template is a tree of three node kinds. Each node keeps the
absolute offset at which it starts in the source text (the tag included,
when it has one) and its intrinsic tag name without the leading ``!``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ScalarNode:
    """A scalar value as written in the source."""

    value: str
    offset: int
    end: int
    tag: str | None = None
    style: str | None = None
    raw: str = ""


@dataclass(frozen=True)
class SeqNode:
    """A sequence of nodes."""

    items: tuple[Node, ...]
    offset: int
    end: int
    tag: str | None = None


@dataclass(frozen=True)
class MapEntry:
    """One key/value pair of a mapping."""

    key: str
    key_offset: int
    value: Node


@dataclass(frozen=True)
class MapNode:
    """A mapping of string keys to nodes."""

    entries: tuple[MapEntry, ...]
    offset: int
    end: int
    tag: str | None = None

    def entry(self, key: str) -> MapEntry | None:
        """Return the entry for ``key``; the last one wins on duplicates."""
        found = None
        for entry in self.entries:
            if entry.key == key:
                found = entry
        return found

    def get(self, key: str) -> Node | None:
        """Return the value node for ``key``, if present."""
        entry = self.entry(key)
        return entry.value if entry is not None else None

    def get_map(self, key: str) -> MapNode | None:
        """Return the value for ``key`` only when it is a mapping."""
        value = self.get(key)
        return value if isinstance(value, MapNode) else None

    def get_str(self, key: str) -> str | None:
        """Return the value for ``key`` only when it is an untagged scalar."""
        value = self.get(key)
        if isinstance(value, ScalarNode) and value.tag is None:
            return value.value
        return None

    def keys(self) -> list[str]:
        """Entry keys in document order."""
        return [entry.key for entry in self.entries]


Node = MapNode | SeqNode | ScalarNode


@dataclass(frozen=True)
class Template:
    """A parsed template together with the text and file it came from."""

    source: str
    path: Path | None
    root: MapNode

    def section(self, name: str) -> MapNode | None:
        """Return a top-level section when it is a mapping."""
        return self.root.get_map(name)

    @property
    def directory(self) -> Path:
        """Directory that relative child template paths resolve against."""
        if self.path is None:
            return Path.cwd()
        return self.path.parent
