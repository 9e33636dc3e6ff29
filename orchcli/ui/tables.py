"""Rich table builders for list and get output."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from rich import box
from rich.table import Table
from rich.text import Text

from orchcli.ui.console import out_console

NONE_VALUE = "<none>"
OBSCURED_VALUE = "********"


def value_or_none(value: Any) -> str:
    """Render empty or missing values as ``<none>``."""
    if value is None or value == "":
        return NONE_VALUE
    return str(value)


def obscure_value(value: Any) -> str:
    """Hide a secret, still distinguishing set from unset."""
    if value is None or value == "":
        return NONE_VALUE
    return OBSCURED_VALUE


def resource_table(
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
    *,
    debug_headers: bool = False,
) -> Table:
    """Build a borderless table, or an ASCII-boxed one for ``--debug-headers``."""
    table = Table(
        box=box.ASCII if debug_headers else None,
        show_edge=debug_headers,
        pad_edge=False,
        header_style="heading",
    )
    for header in headers:
        table.add_column(header, no_wrap=True)
    for row in rows:
        # Text cells so that brackets in values are never read as markup.
        table.add_row(*(Text(str(cell)) for cell in row))
    return table


def print_table(
    headers: Sequence[str],
    rows: Iterable[Sequence[Any]],
    *,
    debug_headers: bool = False,
) -> None:
    out_console.print(resource_table(headers, rows, debug_headers=debug_headers))
