"""
Logging setup shared by the server and serverless entry points.

Image bytes and the API key are never passed to the logger.
"""

import logging

from headshot.config import settings

logger = logging.getLogger("headshot")


def setup_logger(level=None):
    """Attach a console handler to the `headshot` logger once."""
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(handler)

    return logger
