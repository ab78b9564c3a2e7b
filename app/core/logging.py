"""
Logging setup for the Employee Management Service.

All modules obtain their logger through ``get_logger(__name__)`` so that
format and level are configured in one place.
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """
    Configure the root logger once.

    Args:
        level: Log level name, defaults to settings.LOG_LEVEL
    """
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.addHandler(handler)

    # Quiet noisy client libraries
    logging.getLogger("aiokafka").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured for the service."""
    setup_logging()
    return logging.getLogger(name)
