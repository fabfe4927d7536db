"""Logging configuration.

Status lines for the operator go through the rich console (see
`cli.ui_components`). This module wires the stdlib `logging` tree to a
`RichHandler` so the command trace (`DEBUG`) and library warnings share the
same terminal rendering.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO", *, console: Console | None = None) -> logging.Logger:
    """Configure the root logger once per CLI invocation."""

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return root_logger
