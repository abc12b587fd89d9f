"""
Template parsing into position-carrying nodes.

Public API:
    parse: Parse template text into a Template
    load: Read and parse a template file
    TemplateLoader: PyYAML loader that stops at composition
    Template, MapNode, MapEntry, SeqNode, ScalarNode: node model
"""

from .loader import TemplateLoader, load, parse
from .nodes import MapEntry, MapNode, Node, ScalarNode, SeqNode, Template

__all__ = [
    "parse",
    "load",
    "TemplateLoader",
    "Template",
    "Node",
    "MapNode",
    "MapEntry",
    "SeqNode",
    "ScalarNode",
]
