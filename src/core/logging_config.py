"""Logging setup for the CLI.

Diagnostics go to stderr through Rich so stdout stays clean for `--json`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAMES = ("core", "adapters", "cli")


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Attach a single RichHandler to the package loggers (idempotent)."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    for name in _LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            handler = RichHandler(
                console=Console(stderr=True),
                show_path=False,
                rich_tracebacks=False,
            )
            handler.setFormatter(logging.Formatter("%(message)s"))
            logger.addHandler(handler)
