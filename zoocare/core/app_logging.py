"""Logging configuration helpers."""

import logging

from zoocare.core.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("zoocare")
    logger.setLevel((level or settings.LOG_LEVEL).upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
