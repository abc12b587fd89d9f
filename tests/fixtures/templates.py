"""
Template fixtures for testing.

Provides a helper writing template files into the per-test temp directory.
"""

from collections.abc import Callable
from pathlib import Path

import pytest


CHILD_TEMPLATE = """\
Parameters:
  Baz:
    Type: String
  Region:
    Type: String
    Default: eu-west-1
Resources:
  Bucket:
    Type: AWS::S3::Bucket
Outputs:
  BucketName:
    Value: !Ref Bucket
"""


@pytest.fixture
def write_template(temp_dir: Path) -> Callable[[str, str], Path]:
    """
    Write a template below ``temp_dir`` and return its path.

    Example:
        path = write_template("parent.yaml", "Resources: {}\\n")
    """

    def _write(name: str, text: str) -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def child_template(write_template: Callable[[str, str], Path]) -> Path:
    """A child template declaring Baz (required), Region (default), BucketName output."""
    return write_template("child.yaml", CHILD_TEMPLATE)
