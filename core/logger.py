"""
Console logging setup.

Usage:
    from core.logger import get_logger
    logger = get_logger(__name__)
"""
import logging
from typing import Optional

_initialized = False


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once with a console handler."""
    global _initialized
    if _initialized:
        return

    from core.config import settings

    level_name = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root.addHandler(console)

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Initializes logging on first call."""
    setup_logging()
    return logging.getLogger(name)
