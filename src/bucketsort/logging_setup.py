"""Centralized logging configuration for the ``bucketsort`` package.

``configure_logging`` attaches a single ``StreamHandler`` to the package root
logger and is called once by the CLI. Library modules only call
``get_logger(__name__)`` and never attach handlers themselves.
"""

import logging
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = "bucketsort"
_CONFIGURED = False

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def parse_level(level: Union[int, str, None], default: int = logging.WARNING) -> int:
    """Translate a level name or number into a logging level."""
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return default


def configure_logging(
    level: Union[int, str, None] = None,
    *,
    fmt: Optional[str] = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Level as int or name (e.g. "INFO"); defaults to WARNING
        fmt: Optional format string
        stream: Output stream for the handler
    """
    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)

    if _CONFIGURED:
        logger.setLevel(parse_level(level))
        return

    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(parse_level(level))
    # Avoid double emission via the root logger
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, keeping the package silent until configured."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
