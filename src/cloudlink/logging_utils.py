"""Runtime logging helpers."""

from __future__ import annotations

import os

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED_LEVEL: str | None = None


def configure_logging(level: str | None = None) -> None:
    """Configure process-level logging once per level."""

    global _CONFIGURED_LEVEL
    resolved = (level or os.getenv("CLOUDLINK_LOG_LEVEL", "WARNING")).upper()
    if resolved == _CONFIGURED_LEVEL:
        return

    logger.remove()
    logger.add(
        RichHandler(
            console=Console(stderr=True),
            show_level=True,
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        ),
        level=resolved,
        format="{message}",
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED_LEVEL = resolved
