"""Version and build information."""

from __future__ import annotations

from typing import Any

from . import __version__


def get_build_info() -> dict[str, Any]:
    """Build info recorded by the setup.py hook, or None values when absent."""
    try:
        from . import _build_info  # type: ignore[attr-defined]

        return {
            "commit": getattr(_build_info, "COMMIT_SHORT", "") or None,
            "full": getattr(_build_info, "COMMIT_HASH", "") or None,
            "message": getattr(_build_info, "COMMIT_MESSAGE", "") or None,
            "time": getattr(_build_info, "BUILD_TIME", "") or None,
            "modified": getattr(_build_info, "MODIFIED", None),
        }
    except ImportError:
        return {
            "commit": None,
            "full": None,
            "message": None,
            "time": None,
            "modified": None,
        }


def version_string() -> str:
    """Human-readable version, with commit when build info is present."""
    build = get_build_info()
    commit = build.get("commit")
    if commit:
        dirty = "*" if build.get("modified") else ""
        return f"stackref {__version__} ({commit}{dirty})"
    return f"stackref {__version__}"
