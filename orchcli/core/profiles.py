"""Profile flag parsing: parameter templates and chart values."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable
from typing import Any

import yaml

from orchcli.core.errors import InvalidFormatError, ValidationError
from orchcli.models.catalog import ParameterTemplate

PARAMETER_TYPES = ("string", "integer")


def parse_parameter_template(spec: str) -> ParameterTemplate:
    """Parse ``<name>=<type>:<display-name>:<default-value>``.

    Surrounding quotes are stripped from the display name and default.
    """
    name, sep, rest = spec.partition("=")
    if not sep:
        raise InvalidFormatError("format should be 'name=type:display:default'")
    name = name.strip()
    if not name:
        raise InvalidFormatError("parameter name cannot be empty")

    parts = rest.split(":", 2)
    if len(parts) != 3:
        raise InvalidFormatError("value format should be 'type:display:default'")
    param_type, display_name, default = (part.strip() for part in parts)

    if param_type not in PARAMETER_TYPES:
        raise InvalidFormatError(
            f"invalid parameter type '{param_type}', must be one of: "
            + ", ".join(PARAMETER_TYPES)
        )

    return ParameterTemplate(
        name=name,
        type=param_type,
        display_name=display_name.strip("\"'"),
        default=default.strip("\"'"),
        suggested_values=[],
    )


def parse_parameter_templates(specs: Iterable[str]) -> list[ParameterTemplate]:
    """Parse every ``--parameter-template`` flag, naming the bad one on error."""
    templates: list[ParameterTemplate] = []
    for spec in specs:
        try:
            templates.append(parse_parameter_template(spec))
        except InvalidFormatError as exc:
            raise InvalidFormatError(f"invalid parameter template '{spec}': {exc}") from exc
    return templates


def validate_values_yaml(data: bytes) -> None:
    """Chart values must parse as YAML with a mapping at the top level."""
    try:
        parsed: Any = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ValidationError(f"invalid values.yaml: invalid YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValidationError(
            "invalid values.yaml: values.yaml must have a map/object at the top level"
        )


def decode_chart_values(chart_values: str) -> str:
    """Return chart values for display, base64-decoding them when possible."""
    try:
        decoded = base64.b64decode(chart_values, validate=True)
        return decoded.decode("utf-8")
    except (binascii.Error, ValueError):
        return chart_values
