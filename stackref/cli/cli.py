#!/usr/bin/env python3
"""
stackref CLI - check CloudFormation-style templates for unresolved references.

Usage:
    stackref check templates/ --recursive
    stackref watch templates/ --format pretty
    stackref version
"""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from .. import __version__
from ..config import load_config
from ..exceptions import ConfigError
from ..log import InvalidLogLevelError, LogConfig, LoggerFactory
from .output import ConsoleOutput, OutputWriter
from .tools import CheckTool, Tool, VersionTool, WatchTool

# All CLI tools
_TOOLS: list[type[Tool]] = [CheckTool, WatchTool, VersionTool]


def build_parser(tools: list[Tool]) -> argparse.ArgumentParser:
    """Root parser with global options and one subcommand per tool."""
    parser = argparse.ArgumentParser(
        prog="stackref",
        description="Static checks for CloudFormation-style YAML templates",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        help="Configuration file (default: .stackref.yaml in the working directory)",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        metavar="LEVEL",
        help="Log level: trace2, trace, debug, info, warning, error or false",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"stackref {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True
    for tool in tools:
        tool.register(subparsers)
    return parser


def main(
    argv: list[str] | None = None,
    out: OutputWriter | None = None,
    log_stream: TextIO | None = None,
) -> int:
    """Main entry point for the stackref CLI."""
    tools = [tool_cls() for tool_cls in _TOOLS]
    args = build_parser(tools).parse_args(argv)

    try:
        settings = load_config(args.config)
        log_settings = settings.logging
        log_config = LogConfig.from_params(
            args.log_level if args.log_level is not None else log_settings.level,
            log_settings.location,
            log_settings.micros,
            log_settings.colors,
        )
    except (ConfigError, InvalidLogLevelError) as e:
        print(f"stackref: {e}", file=sys.stderr)
        return 2

    lg = LoggerFactory.create_root(log_config, stream=log_stream)
    tool: Tool = args.tool
    tool.setup(args, settings, lg, out if out is not None else ConsoleOutput())
    lg.debug("running tool", extra={"tool": tool.name})
    return tool.run()


if __name__ == "__main__":
    sys.exit(main())
