# Console logging via Rich.
# Created: 2026-10-04

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_configured = False

# Libraries that are chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO") -> None:
    """Install a RichHandler on the root logger (once) and set the level."""
    global _configured

    root = logging.getLogger()
    root.setLevel(level.upper())

    if not _configured:
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
        root.addHandler(handler)
        _configured = True

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
