"""Logging utilities for the arrowword core."""

from __future__ import annotations

import logging
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def parse_level(name: Optional[str], default: int = logging.WARNING) -> int:
    """Map a level name such as ``"debug"`` to its numeric value."""

    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> None:
    """Configure root logging with a compact formatter.

    The engine recomputes on every keystroke, so per-edit messages are logged
    at DEBUG and only completions, restores and store failures surface at the
    default level. Output goes to ``stream`` (stderr when omitted) so it never
    mixes with rendered puzzles on stdout.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "arrowword")
