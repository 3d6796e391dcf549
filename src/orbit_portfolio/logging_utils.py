"""Configure the loguru sink used across the dashboard core."""

from __future__ import annotations

import sys
from typing import Any, Optional, TextIO

from loguru import logger

from .constants import DEFAULT_LOG_LEVEL

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{line}</cyan>\n"
    "{message}"
)


def configure_logging(level: str = DEFAULT_LOG_LEVEL, sink: Optional[TextIO] = None) -> int:
    """Route all dashboard logging to one sink at *level*.

    Existing handlers are removed first, so repeated calls (one per CLI
    invocation) never duplicate output. Defaults to stderr, keeping stdout
    free for the CLI's JSON. Returns the loguru handler id.
    """
    logger.remove()
    options: dict[str, Any] = {"level": level.upper(), "format": LOG_FORMAT}
    return logger.add(sink if sink is not None else sys.stderr, **options)
