"""Persistent CLI configuration backed by a YAML file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from orchcli.core.errors import ValidationError
from orchcli.utils.state import resolve_config_path

DEFAULT_API_ENDPOINT = "https://api.kind.internal/"
TIME_FORMATS = ("human", "iso8601", "epoch")
FEATURE_PREFIX = "orchestrator.features."

# Keys accepted by `config set`, with the type their value is coerced to.
CONFIG_KEYS: dict[str, type] = {
    "api-endpoint": str,
    "project": str,
    "verbose": bool,
    "debug-headers": bool,
    "noauth": bool,
    "time-format": str,
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class CLIConfig:
    """Settings shared by every command of one invocation."""

    api_endpoint: str = DEFAULT_API_ENDPOINT
    project: str = ""
    verbose: bool = False
    debug_headers: bool = False
    noauth: bool = False
    time_format: str = "human"
    features: dict[str, bool] = field(default_factory=dict)

    def feature_enabled(self, feature: str) -> bool:
        """Features are enabled unless the config explicitly disables them."""
        return self.features.get(feature, True)


def parse_bool(key: str, value: Any) -> bool:
    """Read a boolean setting; YAML booleans pass through, strings are matched."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValidationError(f"invalid boolean value for {key}: {value}")


def coerce_value(key: str, raw: str) -> Any:
    """Convert a `config set` value to the key's declared type."""
    if key.startswith(FEATURE_PREFIX):
        kind: type = bool
    elif key in CONFIG_KEYS:
        kind = CONFIG_KEYS[key]
    else:
        raise ValidationError(f"unknown configuration key: {key}")

    if kind is bool:
        return parse_bool(key, raw)
    if key == "time-format" and raw not in TIME_FORMATS:
        raise ValidationError(
            f"invalid time-format {raw}, must be one of: {', '.join(TIME_FORMATS)}"
        )
    return raw


def load_raw_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load the config file as a flat mapping; a missing file is empty."""
    config_path = resolve_config_path(path)
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        try:
            payload = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValidationError(f"invalid configuration file {config_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationError(f"invalid configuration file {config_path}: expected a mapping")
    return payload


def save_raw_config(payload: dict[str, Any], path: str | Path | None = None) -> Path:
    """Write the config file, creating its directory with private permissions."""
    config_path = resolve_config_path(path)
    config_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    config_path.write_text(yaml.safe_dump(payload, sort_keys=True), encoding="utf-8")
    return config_path


def feature_flags(payload: dict[str, Any]) -> dict[str, bool]:
    """Collect feature flags keyed by their full dotted name.

    Flags may be written as dotted keys (``orchestrator.features.x: false``)
    or nested (``orchestrator: {features: {x: false}}``); a dotted key wins
    when both name the same feature.
    """
    flags: dict[str, bool] = {}
    orchestrator = payload.get("orchestrator")
    if isinstance(orchestrator, dict) and orchestrator.get("features") is not None:
        nested = orchestrator["features"]
        if not isinstance(nested, dict):
            raise ValidationError("orchestrator.features must be a mapping of feature flags")
        for name, value in nested.items():
            key = f"{FEATURE_PREFIX}{name}"
            flags[key] = parse_bool(key, value)
    for key, value in payload.items():
        if key.startswith(FEATURE_PREFIX):
            flags[key] = parse_bool(key, value)
    return flags


def config_from_mapping(payload: dict[str, Any]) -> CLIConfig:
    """Build a :class:`CLIConfig` from file contents, ignoring unknown keys."""
    return CLIConfig(
        api_endpoint=str(payload.get("api-endpoint") or DEFAULT_API_ENDPOINT),
        project=str(payload.get("project") or ""),
        verbose=parse_bool("verbose", payload.get("verbose")),
        debug_headers=parse_bool("debug-headers", payload.get("debug-headers")),
        noauth=parse_bool("noauth", payload.get("noauth")),
        time_format=str(payload.get("time-format") or "human"),
        features=feature_flags(payload),
    )


def render_config(payload: dict[str, Any], fmt: str = "yaml") -> str:
    """Render the raw config for `config show`."""
    if fmt == "yaml":
        return yaml.safe_dump(payload, sort_keys=True)
    return "\n".join(f"{key}: {payload[key]}" for key in sorted(payload))
