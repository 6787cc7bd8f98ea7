"""Logging bootstrap (Rich).

Library modules only call `logging.getLogger(__name__)`; the CLI configures
handlers once at startup. Logs go to stderr so stdout carries results only.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"


def configure_logging(level: str = "INFO", *, console: Console | None = None) -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level}")

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
