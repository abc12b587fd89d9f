"""
Reference extraction.

Walks the Resources and Outputs sections of a template and records every
intrinsic-function reference together with the absolute offset of the
referenced name in the source text.

The kind of a node sometimes depends on where it sits rather than on the
node itself: the first item of ``!If [Cond, a, b]`` names a condition, the
value of ``DependsOn:`` names a resource. That context is passed down the
traversal as an argument; the tree is never modified.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..template.nodes import MapNode, Node, ScalarNode, SeqNode, Template
from ..template.tags import (
    BARE_KINDS,
    FIRST_ITEM_KINDS,
    LONG_FORM_KEYS,
    PLACEHOLDER_OPEN_SKIP,
    PSEUDO_PARAMETER_PREFIX,
    REFERENCING_SECTIONS,
    TAG_SKIP,
    Kind,
    kind_for_tag,
    quote_skip,
)

# ${Name} in a Sub string; no nested braces
_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")


@dataclass(frozen=True)
class Reference:
    """One use of a name by an intrinsic function."""

    kind: Kind
    name: str
    offset: int

    @property
    def length(self) -> int:
        return len(self.name)


def extract(node: Node | None, context: Kind | None = None) -> list[Reference]:
    """
    Collect references below ``node``, depth first.

    Args:
        node: Subtree to walk (None yields nothing)
        context: Kind inherited from an enclosing structure

    Returns:
        References in document order
    """
    if node is None:
        return []
    if isinstance(node, MapNode):
        return _extract_map(node, context)
    if isinstance(node, SeqNode):
        return _extract_seq(node, context)
    return _extract_scalar(node, context)


def extract_template(template: Template) -> list[Reference]:
    """References of the Resources section followed by those of Outputs."""
    references: list[Reference] = []
    for section in REFERENCING_SECTIONS:
        references.extend(extract(template.root.get(section)))
    return references


def _extract_map(node: MapNode, context: Kind | None) -> list[Reference]:
    inherited = kind_for_tag(node.tag) or context
    references: list[Reference] = []
    for entry in node.entries:
        child_context = LONG_FORM_KEYS.get(entry.key, inherited)
        references.extend(extract(entry.value, child_context))
    return references


def _extract_seq(node: SeqNode, context: Kind | None) -> list[Reference]:
    kind = kind_for_tag(node.tag) or context
    references: list[Reference] = []
    for index, item in enumerate(node.items):
        if kind is Kind.DEPENDS_ON:
            item_context: Kind | None = kind
        elif kind in FIRST_ITEM_KINDS and index == 0:
            item_context = kind
        else:
            item_context = None
        references.extend(extract(item, item_context))
    return references


def _extract_scalar(node: ScalarNode, context: Kind | None) -> list[Reference]:
    tagged = kind_for_tag(node.tag)
    kind = tagged or context
    if kind is None or (node.tag is not None and tagged is None):
        # Untracked tags (!Join, !Select ...) reset the context
        return []

    # Short-form tags put "!Tag " before the value; long forms do not
    skip = TAG_SKIP.get(tagged, 0) if tagged is not None else 0
    start = node.offset + skip + quote_skip(node.style)

    if kind in BARE_KINDS:
        if tagged is not None:
            return []
        return [Reference(kind, node.value, start)]

    if kind is Kind.GET_ATT:
        return [Reference(kind, node.value, start)]

    if kind is Kind.REF:
        if node.value.startswith(PSEUDO_PARAMETER_PREFIX):
            return []
        return [Reference(kind, node.value, start)]

    return _extract_placeholders(node)


def _extract_placeholders(node: ScalarNode) -> list[Reference]:
    """
    One reference per ``${Name}`` placeholder of a Sub string.

    Matching runs on the source slice of the node, not its value: escapes
    (``\\t``, ``\\"``, ``''``), folding and block indentation make the value
    shorter than the text it came from.
    """
    text, base = node.raw, node.offset

    references = []
    for match in _PLACEHOLDER.finditer(text):
        name = match.group(1)
        if name.startswith("!") or name.startswith(PSEUDO_PARAMETER_PREFIX):
            # ${!Literal} escapes and pseudo-parameters
            continue
        offset = base + PLACEHOLDER_OPEN_SKIP + match.start()
        references.append(Reference(Kind.SUB, name, offset))
    return references
