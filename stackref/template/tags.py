"""
Intrinsic tags and the offset table used to locate referenced names.

The parser only knows where a node starts. A name referenced by a node
starts some fixed number of characters later depending on how the node is
written (``!Ref Name``, ``!Sub "x-${Name}"``), and these tables hold those
distances.
"""

from enum import Enum
from types import MappingProxyType


class Kind(str, Enum):
    """Kind of intrinsic reference."""

    REF = "Ref"
    SUB = "Sub"
    GET_ATT = "GetAtt"
    IF = "If"
    FIND_IN_MAP = "FindInMap"
    DEPENDS_ON = "DependsOn"


# Characters between the start of a short-form tagged node and its value:
# the tag marker itself plus one separating space ("!Ref " is 5).
TAG_SKIP = MappingProxyType(
    {
        Kind.REF: 5,
        Kind.SUB: 5,
        Kind.GET_ATT: 8,
        Kind.IF: 4,
        Kind.FIND_IN_MAP: 11,
    }
)

# Opening quote of a flow scalar; other styles take no characters.
QUOTE_SKIP = MappingProxyType({None: 0, "": 0, "'": 1, '"': 1})

# Length of "${" in a Sub placeholder
PLACEHOLDER_OPEN_SKIP = 2

# Kinds whose value is a bare name rather than a tagged scalar
BARE_KINDS = frozenset({Kind.IF, Kind.FIND_IN_MAP, Kind.DEPENDS_ON})

# Sequence forms whose first item names a condition or mapping table
FIRST_ITEM_KINDS = frozenset({Kind.IF, Kind.FIND_IN_MAP})

# Map keys that set the context of their value
LONG_FORM_KEYS = MappingProxyType(
    {
        "Ref": Kind.REF,
        "Fn::Sub": Kind.SUB,
        "Fn::GetAtt": Kind.GET_ATT,
        "Fn::If": Kind.IF,
        "Fn::FindInMap": Kind.FIND_IN_MAP,
        "DependsOn": Kind.DEPENDS_ON,
    }
)

PSEUDO_PARAMETER_PREFIX = "AWS::"

STACK_RESOURCE_TYPE = "AWS::CloudFormation::Stack"

# Top-level sections whose keys can be referenced
REFERENCEABLE_SECTIONS = ("Parameters", "Resources", "Conditions", "Mappings")

# Top-level sections scanned for references
REFERENCING_SECTIONS = ("Resources", "Outputs")


def kind_for_tag(tag: str | None) -> Kind | None:
    """Map a tag name (without ``!``) to a reference kind, if it is one."""
    if tag is None:
        return None
    try:
        return Kind(tag)
    except ValueError:
        return None


def quote_skip(style: str | None) -> int:
    """Characters taken by the opening quote of a scalar written in ``style``."""
    return QUOTE_SKIP.get(style, 0)
