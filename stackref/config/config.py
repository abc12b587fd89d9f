"""
Configuration loading with environment variable overrides.

Configuration is read from a YAML file, overridden by ``STACKREF_*``
environment variables and validated against ``StackRefConfig``.

Environment Variable Override Format:
    STACKREF_<SECTION>_<KEY>=value

Examples:
    STACKREF_LOGGING_LEVEL=debug
    STACKREF_ANALYSIS_GETATT_LOCAL_RESOURCES=true
    STACKREF_OUTPUT_FORMAT=json
"""

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from ..exceptions import ConfigError
from .constants import DEFAULT_CONFIG_FILENAME, DEFAULT_ENV_PREFIX, MAX_CONFIG_SIZE_BYTES
from .schemas import StackRefConfig


def _check_file_size(path: Path) -> None:
    """Check file size limit before reading."""
    file_size = os.path.getsize(path)
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            f"Configuration file '{path}' is {file_size} bytes, "
            f"exceeding maximum size of {MAX_CONFIG_SIZE_BYTES} bytes"
        )


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a dict."""
    if not path.is_file():
        raise ConfigError("Config file not found", path=str(path))
    _check_file_size(path)

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}", path=str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file must contain a mapping, got {type(data).__name__}",
            path=str(path),
        )
    return data


def _collect_env_vars(env_prefix: str) -> dict[str, str]:
    """Collect all environment variables with the configured prefix."""
    return {k: v for k, v in os.environ.items() if k.startswith(env_prefix)}


def _env_key_to_path(env_key: str, env_prefix: str) -> list[str]:
    """
    Convert environment variable key to configuration path.

    The first component names the section, the rest is the key, so keys may
    contain underscores: STACKREF_ANALYSIS_SKIP_REMOTE_TEMPLATE_URLS ->
    ['analysis', 'skip_remote_template_urls'].
    """
    parts = env_key[len(env_prefix) :].lower().split("_", 1)
    return [p for p in parts if p]


def _convert_env_value(value: str) -> bool | int | float | str | list[Any] | None:
    """Convert environment variable string to appropriate type."""
    if value.lower() in ("null", "none", ""):
        return None

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    if "," in value:
        return [_convert_env_value(v.strip()) for v in value.split(",")]

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    return value


def _set_nested_value(data: dict[str, Any], path: list[str], value: Any) -> None:
    """Set a nested value, creating intermediate sections as needed."""
    current = data
    for part in path[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[path[-1]] = value


def apply_env_overrides(
    config_data: dict[str, Any], env_prefix: str = DEFAULT_ENV_PREFIX
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration data.

    Args:
        config_data: Configuration data dictionary (modified in place)
        env_prefix: Prefix of the variables to apply

    Returns:
        Configuration data with overrides applied
    """
    for env_key, env_value in _collect_env_vars(env_prefix).items():
        path = _env_key_to_path(env_key, env_prefix)
        if len(path) < 2:
            continue
        converted = _convert_env_value(env_value)
        if converted is None:
            continue
        _set_nested_value(config_data, path, converted)
    return config_data


def find_config_file(start: Path | None = None) -> Path | None:
    """Return ``.stackref.yaml`` in ``start`` (default: working directory)."""
    candidate = (start or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config(
    path: str | Path | None = None,
    enable_env_overrides: bool = True,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> StackRefConfig:
    """
    Load and validate configuration.

    Args:
        path: Explicit config file; when None, ``.stackref.yaml`` in the
            working directory is used if it exists, else defaults apply
        enable_env_overrides: Whether to apply environment variable overrides
        env_prefix: Prefix for environment variables

    Returns:
        Validated configuration

    Raises:
        ConfigError: If the file cannot be read or fails validation
    """
    config_path = Path(path) if path is not None else find_config_file()
    data = _read_config_file(config_path) if config_path is not None else {}

    if enable_env_overrides:
        data = apply_env_overrides(data, env_prefix)

    try:
        return StackRefConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration: {e.error_count()} error(s)",
            details=_format_validation_errors(e),
        ) from e


def _format_validation_errors(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )
