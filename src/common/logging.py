"""Logging configuration for Story Engine.

Logs go to stderr by default so the CLI can print stories on stdout.
Set ``STORY_ENGINE_LOG_LEVEL`` (e.g. ``DEBUG``) to change the default level.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

LOG_LEVEL_ENV = "STORY_ENGINE_LOG_LEVEL"


def _default_level() -> int:
    name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    level: int | None = None,
    module_name: str = "story_engine",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return a logger with consistent formatting.

    Args:
        level: Logging level (default from ``STORY_ENGINE_LOG_LEVEL``, else INFO).
        module_name: Name for the logger instance.
        stream: Output stream for the handler (default stderr).

    Returns:
        Configured logger. Calling again with the same name returns it unchanged.
    """
    logger = logging.getLogger(module_name)

    if logger.handlers:
        return logger

    if level is None:
        level = _default_level()
    logger.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger
