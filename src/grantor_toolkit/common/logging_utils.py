"""
Logging setup shared by the CLI and the Flask app.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

_HANDLER_NAME = "grantor_toolkit.stream"


def configure_logging(
    level: int = logging.INFO,
    logger_name: Optional[str] = "grantor_toolkit",
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Attach a stream handler (stderr by default) to the package logger.

    Safe to call more than once: an existing handler installed by this
    function is reused instead of duplicated.

    Args:
        level: Logging level for the logger.
        logger_name: Logger to configure. None = root logger.
        stream: Output stream (default: sys.stderr).

    Returns:
        The installed (or reused) handler.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return handler

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


def parse_level(name: Optional[str], default: int = logging.INFO) -> int:
    """Map a level name like "debug" to its logging constant."""
    if not name:
        return default
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default
