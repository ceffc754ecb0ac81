"""Logging setup for debpkg.

Library modules only create loggers; the CLI (or any embedding application)
calls `configure_logging` once.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from .constants import ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL

_LEVEL_MAP = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def resolve_level(level: str | int | None = None) -> int:
    """Resolve a log level.

    Order of precedence:
    1. Explicit `level` argument if given
    2. Environment variable `DEBPKG_LOG_LEVEL`
    3. Fallback to `WARNING`
    """
    if level is None:
        level = os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)
    if isinstance(level, str):
        return _LEVEL_MAP.get(level.upper(), logging.WARNING)
    return level


def configure_logging(level: str | int | None = None, *, force: bool = False) -> None:
    logging.basicConfig(
        level=resolve_level(level),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "debpkg")


__all__ = ["configure_logging", "get_logger", "resolve_level"]
