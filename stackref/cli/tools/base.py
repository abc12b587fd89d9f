"""
Base tool class for the command-line interface.

A tool contributes one subcommand: it declares its arguments on an argparse
subparser and runs with the parsed arguments, the loaded configuration, a
logger and an output writer bound by the CLI.
"""

from __future__ import annotations

import argparse
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ...config import StackRefConfig
from ...exceptions import ToolError
from ...log import Logger, null_lg
from ..output import ConsoleOutput, OutputWriter


@dataclass
class ToolConfig:
    """Configuration for a tool."""

    name: str
    aliases: list[str] = field(default_factory=list)
    help_text: str = ""
    description: str = ""


class Tool:
    """
    Base class for CLI subcommands.

    Subclasses pass a ToolConfig, override add_args() to declare arguments
    and implement run() returning the process exit code.
    """

    def __init__(self, config: ToolConfig) -> None:
        self.config = config
        self.args = argparse.Namespace()
        self.settings = StackRefConfig()
        self._lg: Logger | None = None
        self.out: OutputWriter = ConsoleOutput()

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def lg(self) -> Logger:
        return self._lg if self._lg is not None else null_lg()

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        """Add tool-specific arguments. Default: none."""

    def register(self, subparsers: argparse._SubParsersAction) -> None:
        parser = subparsers.add_parser(
            self.config.name,
            aliases=self.config.aliases,
            help=self.config.help_text,
            description=self.config.description or self.config.help_text,
        )
        self.add_args(parser)
        parser.set_defaults(tool=self)

    def setup(
        self,
        args: argparse.Namespace,
        settings: StackRefConfig,
        lg: Logger,
        out: OutputWriter,
    ) -> None:
        """Bind parsed arguments and runtime services before run()."""
        self.args = args
        self.settings = settings
        self._lg = lg
        self.out = out

    def run(self) -> int:
        raise NotImplementedError(f"tool '{self.name}' does not implement run()")


def find_templates(
    paths: Iterable[str | Path], suffixes: Iterable[str], recursive: bool = False
) -> list[Path]:
    """
    Expand command-line paths into template files.

    Files are taken as given. Directories contribute the files carrying one
    of ``suffixes``: their direct children, or the whole tree when
    ``recursive`` is set.

    Raises:
        ToolError: If a path does not exist
    """
    suffixes = tuple(suffixes)
    found: list[Path] = []
    seen: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if path.is_file():
            candidates = [path]
        elif path.is_dir():
            walk = path.rglob("*") if recursive else path.iterdir()
            candidates = sorted(
                p for p in walk if p.is_file() and p.suffix in suffixes
            )
        else:
            raise ToolError("path does not exist", path=str(path))
        for candidate in candidates:
            key = candidate.resolve()
            if key not in seen:
                seen.add(key)
                found.append(candidate)
    return found
