"""Template watch tool."""

from __future__ import annotations

import argparse
import time
from pathlib import Path

from ...analysis import Analyzer
from ...config import StackRefConfig
from ...diagnostics import DiagnosticRegistry
from ...exceptions import ToolError
from ...log import Logger, derive_lg
from ...watcher import TemplateWatcher
from ..output import OutputWriter
from .base import Tool, ToolConfig, find_templates
from .check_tool import EXIT_FAILURE, EXIT_OK, add_output_args, build_renderer


class WatchTool(Tool):
    """Re-analyze templates whenever they change on disk."""

    def __init__(self) -> None:
        super().__init__(
            ToolConfig(
                name="watch",
                help_text="Watch templates and report diagnostics on change",
                description=(
                    "Analyze templates, then keep watching the given paths and "
                    "re-analyze a template each time it is written. Parents of a "
                    "changed child template are re-analyzed too. Removed "
                    "templates are forgotten. Stop with Ctrl-C."
                ),
            )
        )
        self.registry = DiagnosticRegistry()
        self._analyzer: Analyzer | None = None

    @property
    def analyzer(self) -> Analyzer:
        if self._analyzer is None:
            raise ToolError("watch tool used before setup()", tool=self.name)
        return self._analyzer

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "paths", nargs="*", default=["."], help="Directories or files to watch"
        )
        parser.add_argument(
            "--debounce-ms",
            type=int,
            default=300,
            help="Quiet time before a changed file is re-analyzed",
        )
        add_output_args(parser)

    def setup(
        self,
        args: argparse.Namespace,
        settings: StackRefConfig,
        lg: Logger,
        out: OutputWriter,
    ) -> None:
        super().setup(args, settings, lg, out)
        self._analyzer = Analyzer(
            settings.analysis, derive_lg(derive_lg(lg, "watch"), "analysis")
        )

    def on_change(self, path: Path) -> None:
        results = [(path, self.analyzer.refresh(self.registry, path))]
        for parent in self.analyzer.dependents(path):
            results.append((parent, self.analyzer.refresh(self.registry, parent)))
        build_renderer(self).render(results)
        self.out.flush()

    def on_delete(self, path: Path) -> None:
        self.registry.delete(path)
        self.analyzer.forget(path)
        self.lg.info("template removed", extra={"path": path})
        # parents now report the missing child at their TemplateURL
        parents = self.analyzer.dependents(path)
        if parents:
            build_renderer(self).render(
                [(p, self.analyzer.refresh(self.registry, p)) for p in parents]
            )
            self.out.flush()

    def prepare(self) -> TemplateWatcher:
        """Run the initial pass and build the watcher (not started)."""
        files = find_templates(
            self.args.paths, self.settings.analysis.template_suffixes, recursive=True
        )
        for path in files:
            diagnostics = self.analyzer.refresh(self.registry, path)
            build_renderer(self).render([(path, diagnostics)])
        self.out.flush()

        roots = [p if p.is_dir() else p.parent for p in map(Path, self.args.paths)]
        watcher = TemplateWatcher(
            derive_lg(self.lg, "watch"),
            roots,
            suffixes=self.settings.analysis.template_suffixes,
        )
        return watcher.configure(
            on_change=self.on_change,
            on_delete=self.on_delete,
            debounce_ms=self.args.debounce_ms,
        )

    def run(self) -> int:  # pragma: no cover
        try:
            watcher = self.prepare()
        except ToolError as e:
            self.lg.error("cannot watch templates", extra={"exception": e})
            return EXIT_FAILURE

        watcher.start()
        try:
            while watcher.is_running():
                time.sleep(0.5)
        except KeyboardInterrupt:
            pass
        finally:
            watcher.stop()
        return EXIT_OK
