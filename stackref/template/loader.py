"""
Template loader built on PyYAML composition.

Templates are never constructed into Python objects. The loader stops at
the composed node graph, which still carries tags, scalar styles and source
marks, and converts it into the frozen nodes of ``stackref.template.nodes``.

Intrinsic short-form tags (``!Ref``, ``!Sub``, ``!GetAtt`` ...) need no
constructor for this: PyYAML keeps any unknown local tag on the node.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..exceptions import TemplateLoadError, TemplateParseError
from .nodes import MapEntry, MapNode, Node, ScalarNode, SeqNode, Template

# Tags PyYAML resolves implicitly or that are written as !!type
_CORE_TAG_PREFIX = "tag:yaml.org,2002:"


class TemplateLoader(yaml.SafeLoader):
    """
    Safe YAML loader that composes a template into position-carrying nodes.

    Example:
        loader = TemplateLoader(text, path=Path("stack.yaml"))
        try:
            template = loader.get_template()
        finally:
            loader.dispose()
    """

    def __init__(self, stream: Any, path: Path | None = None) -> None:
        """
        Initialize the loader.

        Args:
            stream: Template text or file object
            path: File the text came from (error reporting only)
        """
        super().__init__(stream)
        self.path = path
        self._source = stream if isinstance(stream, str) else ""
        self._active: set[int] = set()

    def get_template(self) -> Template:
        """
        Compose the single document in the stream into a Template.

        Raises:
            TemplateParseError: On a syntax error, more than one document, a
                recursive alias, or a root that is not a mapping
        """
        try:
            yaml_node = self.get_single_node()
        except yaml.MarkedYAMLError as e:
            mark = e.problem_mark or e.context_mark
            raise TemplateParseError(
                _describe(e),
                path=self.path,
                line=mark.line if mark else None,
                column=mark.column if mark else None,
            ) from e
        except yaml.YAMLError as e:
            raise TemplateParseError(str(e), path=self.path) from e

        if yaml_node is None:
            return Template(self._source, self.path, MapNode((), 0, 0))

        root = self._convert(yaml_node)
        if not isinstance(root, MapNode):
            mark = yaml_node.start_mark
            raise TemplateParseError(
                "template root must be a mapping",
                path=self.path,
                line=mark.line,
                column=mark.column,
            )
        return Template(self._source, self.path, root)

    def _convert(self, yaml_node: yaml.Node) -> Node:
        """Convert a composed PyYAML node (and its children) to a template node."""
        node_id = id(yaml_node)
        if node_id in self._active:
            mark = yaml_node.start_mark
            raise TemplateParseError(
                "recursive alias is not supported in templates",
                path=self.path,
                line=mark.line,
                column=mark.column,
            )

        self._active.add(node_id)
        try:
            if isinstance(yaml_node, yaml.MappingNode):
                return self._convert_mapping(yaml_node)
            if isinstance(yaml_node, yaml.SequenceNode):
                return SeqNode(
                    items=tuple(self._convert(item) for item in yaml_node.value),
                    offset=yaml_node.start_mark.index,
                    end=yaml_node.end_mark.index,
                    tag=_intrinsic_tag(yaml_node.tag),
                )
            return self._convert_scalar(yaml_node)
        finally:
            self._active.discard(node_id)

    def _convert_mapping(self, yaml_node: yaml.MappingNode) -> MapNode:
        """Convert a mapping; entries with non-scalar keys are dropped."""
        entries = []
        for key_node, value_node in yaml_node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                continue
            entries.append(
                MapEntry(
                    key=str(key_node.value),
                    key_offset=key_node.start_mark.index,
                    value=self._convert(value_node),
                )
            )
        return MapNode(
            entries=tuple(entries),
            offset=yaml_node.start_mark.index,
            end=yaml_node.end_mark.index,
            tag=_intrinsic_tag(yaml_node.tag),
        )

    def _convert_scalar(self, yaml_node: yaml.ScalarNode) -> ScalarNode:
        start = yaml_node.start_mark.index
        end = yaml_node.end_mark.index
        return ScalarNode(
            value=str(yaml_node.value),
            offset=start,
            end=end,
            tag=_intrinsic_tag(yaml_node.tag),
            style=yaml_node.style,
            raw=self._source[start:end],
        )


def _intrinsic_tag(tag: str | None) -> str | None:
    """Return the intrinsic name of a local ``!Tag``, or None for core tags."""
    if not tag or tag.startswith(_CORE_TAG_PREFIX):
        return None
    if tag.startswith("!") and len(tag) > 1:
        return tag[1:]
    return None


def _describe(error: yaml.MarkedYAMLError) -> str:
    """Build a one-line description of a PyYAML error."""
    parts = [p for p in (error.context, error.problem) if p]
    return "; ".join(parts) if parts else "invalid YAML"


def parse(source: str, path: Path | str | None = None) -> Template:
    """
    Parse template text.

    Args:
        source: Template text
        path: File the text came from, used to resolve child templates

    Returns:
        Parsed template

    Raises:
        TemplateParseError: If the text is not a usable YAML mapping
    """
    resolved = Path(path) if path is not None else None
    loader = TemplateLoader(source, path=resolved)
    try:
        return loader.get_template()
    finally:
        loader.dispose()


def load(path: Path | str, encoding: str = "utf-8") -> Template:
    """
    Read and parse a template file.

    Raises:
        TemplateLoadError: If the file cannot be read
        TemplateParseError: If the file is not a usable YAML mapping
    """
    file_path = Path(path)
    try:
        source = file_path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateLoadError(
            f"cannot read template: {e.__class__.__name__}: {e}", path=file_path
        ) from e
    return parse(source, file_path)
