"""Custom click parameter types."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import click


class KeyValueType(click.ParamType):
    """A ``key=value`` pair; the value may itself contain ``=``."""

    name = "key=value"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> tuple[str, str]:
        if isinstance(value, tuple):
            return value
        key, sep, item = str(value).partition("=")
        if not sep or not key.strip():
            self.fail(f"{value!r} is not in the form key=value", param, ctx)
        return key.strip(), item


KEY_VALUE = KeyValueType()


def to_mapping(pairs: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Collapse repeated ``key=value`` options; a later key wins."""
    mapping: dict[str, str] = {}
    for key, value in pairs:
        mapping[key] = value
    return mapping
