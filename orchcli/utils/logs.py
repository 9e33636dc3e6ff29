"""Diagnostic logging for ``--verbose`` runs."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from orchcli.ui.console import err_console

ROOT_LOGGER = "orchcli"


class _CliLogHandler(RichHandler):
    """Handler installed by :func:`configure_logging`."""


def configure_logging(verbose: bool) -> None:
    """Route ``orchcli`` log records to stderr; DEBUG when verbose."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, _CliLogHandler) for h in logger.handlers):
        handler = _CliLogHandler(
            console=err_console,
            show_time=False,
            show_path=False,
            markup=False,
        )
        logger.addHandler(handler)
    logger.propagate = False
