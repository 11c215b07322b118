"""Logging setup and user-facing progress reporters."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .rich_logger import FilesPerSecondColumn, QuietProgressReporter, RichProgressReporter

LOGGER_NAME = "mediaplacer"

FILE_FORMAT = "%(asctime)s | %(levelname)-5s | [%(threadName)s] %(message)s"


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    console: Optional[Console] = None,
    log_file: Optional[Union[Path, str]] = None,
) -> logging.Logger:
    """Configure the package logger.

    Per-file decisions are logged at INFO, so they are shown by default;
    ``verbose`` adds DEBUG, ``quiet`` keeps only warnings and errors on the
    console. A log file, when given, always receives DEBUG.

    Args:
        verbose: Show debug messages.
        quiet: Only show warnings and errors on the console.
        console: Rich console to log through; share it with the progress
            reporter so log lines and the progress bar do not interleave.
        log_file: Optional file that receives every record.

    Returns:
        The package logger.
    """
    if quiet:
        console_level = logging.WARNING
    elif verbose:
        console_level = logging.DEBUG
    else:
        console_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if (verbose or log_file) else console_level)
    logger.handlers.clear()
    logger.propagate = False

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    return logger


__all__ = [
    "configure_logging",
    "FilesPerSecondColumn",
    "QuietProgressReporter",
    "RichProgressReporter",
]
