"""
Logging configuration for the envelope layer.

One format for every kibo logger. Logging must not change program
behavior, and request or response bodies are never logged: only
paths, statuses and exception type names.
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "kibo"


def resolve_level(level: str) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Configure root logging and the kibo package logger.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        stream: Where log records are written. Defaults to stdout.
    """
    numeric = resolve_level(level)
    logging.basicConfig(
        level=numeric,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=stream if stream is not None else sys.stdout,
        force=True,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric)

    # Quiet per-request access lines
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
