"""
Sub-stack parameter matching.

Compares the parameters a parent passes to a child stack with the
parameters the child template declares.
"""

from __future__ import annotations

from ..diagnostics import Diagnostic, Severity, build
from ..template import MapEntry, MapNode, Template
from .referenceables import Referenceables, SubStackDefinitions


def match(
    parameters: MapNode | None,
    anchor: MapEntry,
    definitions: SubStackDefinitions,
    source: str,
) -> list[Diagnostic]:
    """
    Diagnose mismatches between supplied and declared child parameters.

    Args:
        parameters: The parent's ``Properties.Parameters`` mapping, if any
        anchor: Entry whose key locates missing-parameter diagnostics
        definitions: Parameters declared by the child template
        source: Parent template text

    Returns:
        An error per unknown supplied parameter, then one diagnostic per
        declared parameter never supplied (error without a default,
        warning with one)
    """
    declared = definitions.parameter_names
    remaining = list(definitions.parameters)
    diagnostics = []

    for entry in parameters.entries if parameters is not None else ():
        if entry.key in declared:
            remaining = [p for p in remaining if p.name != entry.key]
            continue
        diagnostics.append(
            build(
                source,
                entry.key_offset,
                len(entry.key),
                Severity.ERROR,
                f"Referenced file does not have parameter '{entry.key}'",
            )
        )

    for parameter in remaining:
        if parameter.has_default:
            severity = Severity.WARNING
            message = f"Missing value for parameter with default value '{parameter.name}'"
        else:
            severity = Severity.ERROR
            message = f"Missing value for required parameter '{parameter.name}'"
        diagnostics.append(
            build(source, anchor.key_offset, len(anchor.key), severity, message)
        )
    return diagnostics


def match_template(template: Template, referenceables: Referenceables) -> list[Diagnostic]:
    """
    Match every loaded child stack of ``template``.

    Missing-parameter diagnostics sit on the ``Parameters`` key, or on the
    resource's logical id when the parent passes no parameters block.
    """
    diagnostics = []
    for stack in referenceables.sub_stacks:
        if stack.definitions is None:
            continue

        properties = stack.properties
        entry = properties.entry("Parameters") if properties is not None else None
        parameters = entry.value if entry is not None else None
        diagnostics.extend(
            match(
                parameters if isinstance(parameters, MapNode) else None,
                entry if entry is not None else stack.resource,
                stack.definitions,
                template.source,
            )
        )
    return diagnostics
