"""
Reference resolution for templates.

Public API:
    Analyzer: runs a full analysis pass over one document
    extract, extract_template: reference extraction
    collect: referenceable name collection (loads child templates)
    match, match_template: child-stack parameter matching
"""

from .analyzer import Analyzer
from .referenceables import (
    ParameterDefinition,
    Referenceables,
    SubStack,
    SubStackDefinitions,
    collect,
)
from .references import Reference, extract, extract_template
from .substack import match, match_template

__all__ = [
    "Analyzer",
    "Reference",
    "extract",
    "extract_template",
    "Referenceables",
    "SubStack",
    "SubStackDefinitions",
    "ParameterDefinition",
    "collect",
    "match",
    "match_template",
]
