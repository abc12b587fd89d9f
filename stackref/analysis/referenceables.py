"""
Referenceable name collection.

Gathers the names a template exposes (Parameters, Resources, Conditions,
Mappings) and, for every child-stack resource, the outputs and parameters
declared by the child template its TemplateURL points at.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from ..config.schemas import AnalysisConfig
from ..diagnostics import Diagnostic, Severity, build
from ..exceptions import TemplateError
from ..log import Logger, null_lg
from ..template import MapEntry, MapNode, ScalarNode, Template, load
from ..template.tags import quote_skip

_URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


@dataclass(frozen=True)
class ParameterDefinition:
    """A parameter declared by a child template."""

    name: str
    has_default: bool


@dataclass(frozen=True)
class SubStackDefinitions:
    """Outputs and parameters declared by one child template."""

    outputs: frozenset[str]
    parameters: tuple[ParameterDefinition, ...]

    @property
    def parameter_names(self) -> set[str]:
        return {p.name for p in self.parameters}


@dataclass(frozen=True)
class SubStack:
    """A child-stack resource of the analyzed template."""

    name: str
    resource: MapEntry
    url: ScalarNode
    definitions: SubStackDefinitions | None

    @property
    def properties(self) -> MapNode | None:
        if isinstance(self.resource.value, MapNode):
            return self.resource.value.get_map("Properties")
        return None


@dataclass
class Referenceables:
    """Names a template makes available to its references."""

    parameters: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)
    conditions: list[str] = field(default_factory=list)
    mappings: list[str] = field(default_factory=list)
    sub_stacks: list[SubStack] = field(default_factory=list)
    # Child stacks whose template location is not statically known
    opaque_stacks: list[str] = field(default_factory=list)
    # Resolved files of the statically located child templates
    child_paths: list[Path] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @cached_property
    def local_names(self) -> set[str]:
        """Union of the four local sections."""
        return {
            *self.parameters,
            *self.resources,
            *self.conditions,
            *self.mappings,
        }

    @cached_property
    def outputs(self) -> set[str]:
        """Child outputs, qualified as '<resource>.Outputs.<key>'."""
        qualified = set()
        for stack in self.sub_stacks:
            if stack.definitions is None:
                continue
            for key in stack.definitions.outputs:
                qualified.add(f"{stack.name}.Outputs.{key}")
        return qualified

    @cached_property
    def stack_names(self) -> set[str]:
        return {stack.name for stack in self.sub_stacks}


def section_keys(template: Template, name: str) -> list[str]:
    """Keys of a top-level section; empty when missing or not a mapping."""
    section = template.section(name)
    return section.keys() if section is not None else []


def read_definitions(template: Template) -> SubStackDefinitions:
    """Outputs and parameters (with default presence) declared by a template."""
    parameters = []
    section = template.section("Parameters")
    for entry in section.entries if section is not None else ():
        has_default = (
            isinstance(entry.value, MapNode) and entry.value.entry("Default") is not None
        )
        parameters.append(ParameterDefinition(entry.key, has_default))
    return SubStackDefinitions(
        outputs=frozenset(section_keys(template, "Outputs")),
        parameters=tuple(parameters),
    )


class SubStackLoader:
    """
    Loads child templates, once per TemplateURL for the life of the loader.

    One loader is created per analysis pass, so edits to child files are
    picked up by the next pass.
    """

    def __init__(
        self, base_dir: Path, settings: AnalysisConfig, lg: Logger | None = None
    ) -> None:
        self._base_dir = base_dir
        self._settings = settings
        self._lg = lg or null_lg()
        self._cache: dict[str, SubStackDefinitions | TemplateError] = {}

    def resolve_path(self, url: str) -> Path:
        path = Path(url).expanduser()
        if not path.is_absolute():
            path = self._base_dir / path
        return path.resolve()

    def get(self, url: str) -> SubStackDefinitions | TemplateError:
        """Definitions of the child at ``url`` or the error that prevented loading."""
        if url not in self._cache:
            self._cache[url] = self._load(url)
        return self._cache[url]

    def _load(self, url: str) -> SubStackDefinitions | TemplateError:
        path = self.resolve_path(url)
        try:
            child = load(path, encoding=self._settings.encoding)
        except TemplateError as e:
            self._lg.debug(
                "failed to load child template", extra={"url": url, "exception": e}
            )
            return e
        definitions = read_definitions(child)
        self._lg.trace(
            "loaded child template",
            extra={
                "url": url,
                "outputs": len(definitions.outputs),
                "parameters": len(definitions.parameters),
            },
        )
        return definitions


def _is_stack_resource(entry: MapEntry, settings: AnalysisConfig) -> bool:
    if not isinstance(entry.value, MapNode):
        return False
    return entry.value.get_str("Type") in settings.stack_resource_types


def _template_url(entry: MapEntry) -> ScalarNode | None:
    """The TemplateURL value when it is a literal string."""
    if not isinstance(entry.value, MapNode):
        return None
    properties = entry.value.get_map("Properties")
    if properties is None:
        return None
    url = properties.get("TemplateURL")
    if isinstance(url, ScalarNode) and url.tag is None and url.value:
        return url
    return None


def collect(
    template: Template,
    settings: AnalysisConfig | None = None,
    lg: Logger | None = None,
) -> Referenceables:
    """
    Enumerate the names ``template`` exposes, loading child templates.

    A child template that cannot be read or parsed contributes nothing and
    yields an error diagnostic at its TemplateURL value.

    Args:
        template: Parsed template
        settings: Analysis settings (defaults apply when None)
        lg: Logger

    Returns:
        Referenceables of the template
    """
    settings = settings or AnalysisConfig()
    found = Referenceables(
        parameters=section_keys(template, "Parameters"),
        resources=section_keys(template, "Resources"),
        conditions=section_keys(template, "Conditions"),
        mappings=section_keys(template, "Mappings"),
    )

    resources = template.section("Resources")
    if resources is None:
        return found

    loader = SubStackLoader(template.directory, settings, lg)
    for entry in resources.entries:
        if not _is_stack_resource(entry, settings):
            continue
        url = _template_url(entry)
        if url is None or (
            settings.skip_remote_template_urls and _URL_SCHEME.match(url.value)
        ):
            found.opaque_stacks.append(entry.key)
            continue

        found.child_paths.append(loader.resolve_path(url.value))
        result = loader.get(url.value)
        if isinstance(result, TemplateError):
            found.diagnostics.append(_load_failure(template, url, result))
            found.sub_stacks.append(SubStack(entry.key, entry, url, None))
        else:
            found.sub_stacks.append(SubStack(entry.key, entry, url, result))
    return found


def _load_failure(template: Template, url: ScalarNode, error: TemplateError) -> Diagnostic:
    detail = error.message
    if error.line is not None:
        detail = f"{detail} ({error.format_location()})"
    return build(
        template.source,
        url.offset + quote_skip(url.style),
        len(url.value),
        Severity.ERROR,
        f"Unable to load referenced template '{url.value}': {detail}",
    )
