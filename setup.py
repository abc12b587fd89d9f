"""Build hook writing stackref/_build_info.py from the git checkout.

Metadata lives in pyproject.toml; ``stackref version`` reads the generated
module and falls back to the bare version when it is missing.
"""

import subprocess
import sys
from datetime import UTC, datetime
from pathlib import Path

from setuptools import setup
from setuptools.command.build_py import build_py

PACKAGE = "stackref"
ROOT = Path(__file__).parent


def git(*args: str) -> str | None:
    try:
        proc = subprocess.run(
            ["git", *args], capture_output=True, text=True, timeout=5, cwd=ROOT
        )
    except (subprocess.SubprocessError, OSError):
        return None
    return proc.stdout.strip() if proc.returncode == 0 else None


def build_info() -> dict[str, object] | None:
    """Values for _build_info.py, or None outside a git checkout."""
    commit = git("rev-parse", "HEAD")
    if not commit:
        return None
    return {
        "COMMIT_HASH": commit,
        "COMMIT_SHORT": commit[:7],
        "COMMIT_MESSAGE": git("log", "-1", "--format=%s") or "",
        "BUILD_TIME": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "MODIFIED": bool(git("status", "--porcelain")),
    }


def render(values: dict[str, object]) -> str:
    lines = [f'"""Generated by {PACKAGE} setup.py at build time."""', ""]
    lines += [f"{name} = {value!r}" for name, value in values.items()]
    return "\n".join(lines) + "\n"


class build_py_with_info(build_py):
    """build_py that also drops _build_info.py into the built package."""

    def run(self):
        super().run()
        target = Path(self.build_lib) / PACKAGE
        if not target.is_dir():
            return
        values = build_info()
        if values is None:
            print(f"{PACKAGE}: not a git checkout, no build info", file=sys.stderr)
            return
        (target / "_build_info.py").write_text(render(values), encoding="utf-8")
        print(f"{PACKAGE}: build info for {values['COMMIT_SHORT']}", file=sys.stderr)


setup(cmdclass={"build_py": build_py_with_info})
