"""
Analysis pass orchestration.

One pass turns template text into the full diagnostic list for that
document. Child templates are re-read on every pass; the analyzer only
remembers which child files each document loaded, so that dependents can
be re-analyzed when a child changes.
"""

from __future__ import annotations

import threading
from pathlib import Path

from ..config.schemas import AnalysisConfig
from ..diagnostics import Diagnostic, DiagnosticRegistry, Severity, build
from ..exceptions import TemplateError, TemplateLoadError
from ..log import Logger, null_lg
from ..template import parse
from ..template.tags import Kind
from .referenceables import Referenceables, collect
from .references import Reference, extract_template
from .substack import match_template


class Analyzer:
    """
    Finds unresolved references and child-stack parameter mismatches.

    Example:
        analyzer = Analyzer(config.analysis, lg)
        diagnostics = analyzer.analyze(text, Path("stack.yaml"))
    """

    def __init__(
        self, settings: AnalysisConfig | None = None, lg: Logger | None = None
    ) -> None:
        """
        Initialize the analyzer.

        Args:
            settings: Analysis settings (defaults apply when None)
            lg: Logger for pass-level messages
        """
        self._settings = settings or AnalysisConfig()
        self._lg = lg or null_lg()
        # document -> child template files it loaded on its last pass
        self._children: dict[Path, frozenset[Path]] = {}
        self._lock = threading.Lock()

    @property
    def settings(self) -> AnalysisConfig:
        return self._settings

    def analyze(self, source: str, path: Path | str | None = None) -> list[Diagnostic]:
        """
        Run one analysis pass over template text.

        Args:
            source: Template text
            path: File the text belongs to; child TemplateURLs resolve
                against its directory

        Returns:
            Child load failures, unresolved references and parameter
            mismatches, in that order

        Raises:
            TemplateParseError: If the template itself cannot be parsed
        """
        template = parse(source, path)
        referenceables = collect(template, self._settings, self._lg)
        if path is not None:
            self._record_children(Path(path), referenceables.child_paths)
        references = extract_template(template)

        diagnostics = list(referenceables.diagnostics)
        for reference in references:
            if self._resolves(reference, referenceables):
                continue
            self._lg.trace(
                "unresolved reference",
                extra={"kind": reference.kind.value, "name": reference.name},
            )
            diagnostics.append(
                build(
                    source,
                    reference.offset,
                    reference.length,
                    Severity.ERROR,
                    f"Unable to find referenced variable, '{reference.name}'",
                )
            )
        diagnostics.extend(match_template(template, referenceables))

        self._lg.debug(
            "analysis pass complete",
            extra={
                "path": path or "<text>",
                "references": len(references),
                "diagnostics": len(diagnostics),
            },
        )
        return diagnostics

    def analyze_file(self, path: Path | str) -> list[Diagnostic]:
        """
        Read and analyze a template file.

        Raises:
            TemplateLoadError: If the file cannot be read
            TemplateParseError: If the template cannot be parsed
        """
        file_path = Path(path)
        try:
            source = file_path.read_text(encoding=self._settings.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateLoadError(
                f"cannot read template: {e.__class__.__name__}: {e}", path=file_path
            ) from e
        return self.analyze(source, file_path)

    def refresh(
        self,
        registry: DiagnosticRegistry,
        path: Path | str,
        source: str | None = None,
    ) -> list[Diagnostic]:
        """
        Re-analyze a document and replace its registry entry.

        A document that cannot be read or parsed is reported through the
        logger and its entry is cleared; it gets no in-document diagnostic.

        Args:
            registry: Registry to update
            path: Document path
            source: Current text (read from ``path`` when None)

        Returns:
            Diagnostics now recorded for the document
        """
        try:
            if source is None:
                diagnostics = self.analyze_file(path)
            else:
                diagnostics = self.analyze(source, path)
        except TemplateError as e:
            self._lg.error(
                "cannot analyze template", extra={"path": path, "exception": e}
            )
            self.forget(path)
            diagnostics = []
        registry.set(path, diagnostics)
        return diagnostics

    def dependents(self, path: Path | str) -> list[Path]:
        """
        Documents whose last pass loaded ``path`` as a child template.

        Example:
            for parent in analyzer.dependents(changed):
                analyzer.refresh(registry, parent)
        """
        child = Path(path).resolve()
        with self._lock:
            return sorted(
                parent
                for parent, children in self._children.items()
                if child in children and parent != child
            )

    def forget(self, path: Path | str) -> None:
        """Drop the child templates recorded for a document."""
        with self._lock:
            self._children.pop(Path(path).resolve(), None)

    def _record_children(self, path: Path, children: list[Path]) -> None:
        with self._lock:
            self._children[path.resolve()] = frozenset(children)

    def _resolves(self, reference: Reference, found: Referenceables) -> bool:
        if reference.kind is Kind.GET_ATT:
            return self._resolves_get_att(reference.name, found)

        if reference.name in found.local_names:
            return True
        if reference.kind is Kind.SUB and "." in reference.name:
            # ${Resource.Attribute} resolves through the logical id
            logical_id = reference.name.split(".", 1)[0]
            return logical_id in found.resources
        return False

    def _resolves_get_att(self, name: str, found: Referenceables) -> bool:
        if name in found.outputs:
            return True

        logical_id = name.split(".", 1)[0]
        if logical_id in found.opaque_stacks:
            return True
        return (
            self._settings.getatt_local_resources
            and logical_id in found.resources
            and logical_id not in found.stack_names
        )
