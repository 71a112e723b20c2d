"""structlog setup for scripts and embedding applications.

Library modules only call structlog.get_logger(); nothing is configured at
import time. Entry points call configure_logging() once.
"""

from __future__ import annotations

import logging
import os

import structlog

LOG_LEVEL_ENV = "PAIRENGINE_LOG_LEVEL"


def resolve_level(level: str | int | None = None) -> int:
    """Turn a level name/number into a logging level.

    Falls back to $PAIRENGINE_LOG_LEVEL, then INFO.

    Raises:
        ValueError: If the level name is unknown
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(level: str | int | None = None, *, json: bool = False) -> None:
    """Configure structlog with level filtering and a console or JSON renderer.

    Args:
        level: Minimum level to emit (name or number). Defaults to
            $PAIRENGINE_LOG_LEVEL, then INFO.
        json: Render one JSON object per line instead of console output
    """
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
    )
