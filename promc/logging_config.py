"""Logging setup shared by every promc module.

Modules obtain loggers through :func:`get_logger`; the CLI calls
:func:`configure_logging` once at startup to attach a rich handler on stderr.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "promc"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger living under the ``promc`` namespace."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str | int = "WARNING", console: Console | None = None) -> None:
    """Attach a RichHandler to the ``promc`` logger.

    Args:
        level: Level name or number for the package logger.
        console: Console to log to (defaults to a stderr console).
    """
    global _configured

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        root.propagate = False
        _configured = True
