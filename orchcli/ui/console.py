"""Shared Rich consoles and style definitions.

Command results go to stdout via ``out_console``; diagnostics go to
stderr via ``err_console``.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.theme import Theme

ORCH_THEME = Theme(
    {
        "info": "cyan",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "heading": "bold",
        "muted": "dim",
    }
)

# Width used when stdout is piped, so table rows are never wrapped or cut.
PIPE_WIDTH = 400


def _width_for(stream: object) -> int | None:
    isatty = getattr(stream, "isatty", None)
    return None if isatty is not None and isatty() else PIPE_WIDTH


out_console = Console(theme=ORCH_THEME, highlight=False, width=_width_for(sys.stdout))
err_console = Console(stderr=True, theme=ORCH_THEME, highlight=False)
