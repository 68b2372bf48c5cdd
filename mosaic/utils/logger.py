"""Logging setup for the ``mosaic`` logger tree."""

from __future__ import annotations

import logging
from typing import Optional, TextIO


PACKAGE_LOGGER = "mosaic"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def parse_level(value: str) -> int:
    """Map a ``--log-level`` argument (a level name or number) to a level."""

    text = value.strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level {value!r}")
    return level


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """Install one stream handler on the package logger and return it.

    Pruning performs thousands of reversible solve attempts, so per-attempt
    messages are emitted at DEBUG and only progress summaries at INFO. The
    root logger is left alone; calling this again replaces the handler.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    package = logging.getLogger(PACKAGE_LOGGER)
    package.handlers.clear()
    package.addHandler(handler)
    package.setLevel(level)
    package.propagate = False
    return package


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under ``mosaic``, installing the default handler once."""

    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()
    return logging.getLogger(name or PACKAGE_LOGGER)
