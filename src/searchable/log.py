"""Logging configuration for searchable."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from searchable.config import Settings, load_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Handler installed by `setup_logging`, replaced on each call
_handler: Optional[logging.Handler] = None


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Attach a stdout handler to the ``searchable`` logger.

    The level comes from ``settings.search.log_level``. Calling this more
    than once replaces the handler instead of stacking duplicates.
    """
    global _handler
    settings = settings or load_settings()
    logger = logging.getLogger("searchable")
    logger.setLevel(settings.search.log_level.upper())
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)
