"""
Logging setup for the command-line tool.

Library modules only call logging.getLogger(__name__); handlers are
installed here, once, by the CLI.

  Console: rich handler on stderr (WARNING by default, -v INFO, -vv DEBUG,
           -q ERROR)
  File:    optional, captures everything (DEBUG+)
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import FILE_DATE_FORMAT, FILE_FORMAT, LOGGER_NAME, CONSOLE_FORMAT

__all__ = ['console_level', 'setup_logging']


def console_level(verbosity: int = 0, quiet: bool = False) -> int:
    if quiet:
        return logging.ERROR
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    name: str = LOGGER_NAME,
) -> logging.Logger:
    """Configure and return the package logger.

    Calling it again replaces the handlers from the previous call.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    level = console_level(verbosity, quiet)
    ch = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    ch.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(ch)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        logger.addHandler(fh)
        logger.debug("Log file: %s", log_path)

    logger.debug("Console level: %s", logging.getLevelName(level))
    return logger
