"""Logging setup for the CLI.

The curses screen owns the terminal while the editor runs, so records only
go somewhere when a log file is given.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def level_for(verbosity: int) -> int:
    """0 -> WARNING, 1 -> INFO, 2+ -> DEBUG."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int = 0, log_file: Path | None = None) -> None:
    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.NullHandler()
    logging.basicConfig(
        level=level_for(verbosity),
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )
