"""
utils/logger.py
---------------
Centralized logging configuration.
All modules should use `get_logger(__name__)` to obtain a logger instance;
the root level comes from LOG_LEVEL in the environment.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False


def _resolve_level(name: str) -> tuple[int, bool]:
    """Map a level name to its number. The flag is False for unknown names."""
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level, True
    return logging.INFO, False


def _init_logging() -> None:
    """Attach a stdout handler to the root logger, once per process."""
    global _initialized
    if _initialized:
        return
    level, known = _resolve_level(LOG_LEVEL)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)
    _initialized = True
    if not known:
        root.warning(f"Unknown LOG_LEVEL {LOG_LEVEL!r}, using INFO")


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A configured logging.Logger.
    """
    _init_logging()
    return logging.getLogger(name)
