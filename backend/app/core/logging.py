"""Logging setup for the QuoteDesk backend.

Usage:
    from backend.app.core.logging import get_logger
    logger = get_logger(__name__)

The level comes from ``Settings.log_level`` (``QUOTEDESK_LOG_LEVEL``).
"""

import logging
import sys

from backend.app.core.settings import get_settings

ROOT_LOGGER_NAME = "quotedesk"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_configured = False


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stderr handler to the ``quotedesk`` logger namespace."""
    global _logging_configured

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _logging_configured and level is None:
        return root_logger

    level_name = (level or get_settings().log_level or "INFO").upper()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not _logging_configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(handler)
        root_logger.propagate = False
        _logging_configured = True

    return root_logger


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
