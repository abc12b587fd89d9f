"""
Configuration management package.

This module provides:
- load_config for reading .stackref.yaml with environment overrides
- Pydantic schemas the configuration is validated against
"""

from .config import apply_env_overrides, find_config_file, load_config
from .constants import DEFAULT_CONFIG_FILENAME, DEFAULT_ENV_PREFIX, MAX_CONFIG_SIZE_BYTES
from .schemas import AnalysisConfig, LoggingConfig, OutputConfig, StackRefConfig

__all__ = [
    "load_config",
    "find_config_file",
    "apply_env_overrides",
    "StackRefConfig",
    "AnalysisConfig",
    "LoggingConfig",
    "OutputConfig",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_ENV_PREFIX",
    "MAX_CONFIG_SIZE_BYTES",
]
