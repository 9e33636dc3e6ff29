"""Reading user-supplied files and validating free-form arguments."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path

from orchcli.core.errors import ValidationError

STDIN_PATH = "-"
MAX_VALUES_YAML_SIZE = 1 << 20  # 1 MiB

_VERSION_RE = re.compile(
    r"v?[0-9]+\.[0-9]+\.[0-9]+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?"
)


def check_safe_path(path: str) -> None:
    """Reject parent-directory traversal and embedded NUL bytes."""
    clean = os.path.normpath(path)
    if clean.startswith("..") or f"..{os.sep}" in clean:
        raise ValidationError("path traversal detected: '..' not allowed in file paths")
    if "\x00" in path:
        raise ValidationError("null byte detected in file path")


def read_input(path: str) -> bytes:
    """Read a whole file, or stdin when ``path`` is ``-``."""
    check_safe_path(path)
    if path == STDIN_PATH:
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def read_input_with_limit(path: str, limit: int = MAX_VALUES_YAML_SIZE) -> bytes:
    """Like :func:`read_input` but refuse anything larger than ``limit`` bytes."""
    check_safe_path(path)
    if path == STDIN_PATH:
        data = sys.stdin.buffer.read(limit + 1)
    else:
        with open(path, "rb") as f:
            data = f.read(limit + 1)
    if len(data) > limit:
        raise ValidationError(f"input exceeds maximum allowed size of {limit} bytes")
    return data


def validate_version(version: str) -> None:
    """Require a semantic version such as ``1.0.0`` or ``v1.2.3-rc.1``."""
    if not _VERSION_RE.fullmatch(version):
        raise ValidationError(
            f"invalid version format: {version} (expected <major>.<minor>.<patch>)"
        )
