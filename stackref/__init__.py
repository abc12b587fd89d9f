from importlib.metadata import PackageNotFoundError, version

from .analysis import Analyzer, Reference
from .config import StackRefConfig, load_config
from .diagnostics import Diagnostic, DiagnosticRegistry, Range, Severity
from .exceptions import (
    ConfigError,
    StackRefError,
    TemplateError,
    TemplateLoadError,
    TemplateParseError,
    ToolError,
)
from .position import Position, resolve
from .template import Template, load, parse

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("stackref")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    # Analysis
    "Analyzer",
    "Reference",
    "Diagnostic",
    "DiagnosticRegistry",
    "Range",
    "Severity",
    "Position",
    "resolve",
    # Templates
    "Template",
    "parse",
    "load",
    # Config
    "StackRefConfig",
    "load_config",
    # Exceptions
    "StackRefError",
    "ConfigError",
    "TemplateError",
    "TemplateParseError",
    "TemplateLoadError",
    "ToolError",
]
