"""Logging configuration helpers."""

import logging
from mentorhub.core.config import LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("mentorhub")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
