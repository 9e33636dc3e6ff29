"""Filesystem locations used by the CLI."""

from __future__ import annotations

import os
from pathlib import Path

from orchcli.branding import CLI_PRIMARY_COMMAND

CONFIG_ENV_VAR = "ORCH_CLI_CONFIG"
DEFAULT_CONFIG_DIR = Path.home() / f".{CLI_PRIMARY_COMMAND}"


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Resolve the config file: explicit path, then environment, then default."""
    if path is not None:
        return Path(path)
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return DEFAULT_CONFIG_DIR / f"{CLI_PRIMARY_COMMAND}.yaml"
