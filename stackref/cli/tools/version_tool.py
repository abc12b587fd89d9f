"""Version information tool."""

from __future__ import annotations

import argparse
import json

from ... import __version__
from ...version import get_build_info, version_string
from .base import Tool, ToolConfig

_FIELDS = ("semver", "commit", "full", "modified", "time", "message")


class VersionTool(Tool):
    """Display version and build information."""

    def __init__(self) -> None:
        super().__init__(
            ToolConfig(
                name="version",
                help_text="Show version and build info",
                description=(
                    "Display version, commit hash, and build information. "
                    "Pass a field name to print just that value."
                ),
            )
        )

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("field", nargs="?", choices=_FIELDS, help="Field to output")
        parser.add_argument(
            "--json", dest="as_json", action="store_true", help="Output as JSON"
        )

    def run(self) -> int:
        build = get_build_info()
        if self.args.as_json:
            self.out.write(json.dumps({"semver": __version__, **build}, indent=2))
        elif self.args.field == "semver":
            self.out.write(__version__)
        elif self.args.field == "modified":
            value = build.get("modified")
            self.out.write(
                "true" if value else "false" if value is False else "unknown"
            )
        elif self.args.field:
            self.out.write(build.get(self.args.field) or "")
        else:
            self.out.write(version_string())
        return 0
