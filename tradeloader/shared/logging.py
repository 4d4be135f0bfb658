"""
Logging configuration for the application.

Sets up structured logging with a consistent format.
Logging must not change program behavior.
"""

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # Suppress noisy third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@contextmanager
def log_elapsed(message: str) -> Iterator[None]:
    """Log how long the wrapped block took, even if it raised."""
    started = time.perf_counter()
    try:
        yield
    finally:
        logger.info("%s elapsed %.3fs", message, time.perf_counter() - started)
