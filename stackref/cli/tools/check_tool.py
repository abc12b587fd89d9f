"""Template check tool."""

from __future__ import annotations

import argparse
from pathlib import Path

from ...analysis import Analyzer
from ...diagnostics import Diagnostic
from ...exceptions import TemplateError, ToolError
from ...log import derive_lg
from ..render import FORMATS, DiagnosticRenderer
from .base import Tool, ToolConfig, find_templates

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_FAILURE = 2


def add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Diagnostic output format (default: from config, else text)",
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Disable colors in pretty output"
    )


def build_renderer(tool: Tool) -> DiagnosticRenderer:
    """Renderer honoring --format/--no-color over the output config."""
    fmt = tool.args.format or tool.settings.output.format
    color = tool.settings.logging.colors and not tool.args.no_color
    return DiagnosticRenderer(tool.out, fmt, color=color)


class CheckTool(Tool):
    """Analyze templates once and report diagnostics."""

    def __init__(self) -> None:
        super().__init__(
            ToolConfig(
                name="check",
                help_text="Check templates for unresolved references",
                description=(
                    "Analyze templates and report unresolved references and "
                    "child-stack parameter mismatches. Exits 1 when any error "
                    "is reported and 2 when a template cannot be read or parsed."
                ),
            )
        )

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("paths", nargs="+", help="Template files or directories")
        parser.add_argument(
            "-r",
            "--recursive",
            action="store_true",
            help="Descend into subdirectories of directory arguments",
        )
        add_output_args(parser)

    def run(self) -> int:
        try:
            files = find_templates(
                self.args.paths,
                self.settings.analysis.template_suffixes,
                self.args.recursive,
            )
        except ToolError as e:
            self.lg.error("cannot check templates", extra={"exception": e})
            return EXIT_FAILURE

        lg = derive_lg(self.lg, "check")
        analyzer = Analyzer(self.settings.analysis, derive_lg(lg, "analysis"))
        failed = False
        results: list[tuple[Path, list[Diagnostic]]] = []
        for path in files:
            try:
                diagnostics = analyzer.analyze_file(path)
            except TemplateError as e:
                lg.error("cannot analyze template", extra={"exception": e})
                failed = True
                continue
            results.append((path, diagnostics))

        renderer = build_renderer(self)
        renderer.render(results)
        renderer.render_summary(results)
        self.out.flush()

        lg.info("check complete", extra={"files": len(files), "failed": failed})
        if failed:
            return EXIT_FAILURE
        if any(d.is_error for _, ds in results for d in ds):
            return EXIT_DIAGNOSTICS
        return EXIT_OK
