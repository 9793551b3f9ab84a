"""
Logging for the poll auditor.

Every module logs through get_logger(__name__): one stream handler per
logger, level from POLL_LOG_LEVEL (default INFO).

httpx and httpcore log each request at INFO, which would bury fetch
progress under one line per page or balance lookup. Their level comes from
POLL_HTTP_LOG_LEVEL instead (default WARNING).
"""

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

HTTP_LOGGERS = ("httpx", "httpcore")


def _env_level(var: str, default: str) -> int:
    return getattr(logging, os.getenv(var, default).upper(), logging.INFO)


def quiet_http_loggers() -> None:
    """Apply POLL_HTTP_LOG_LEVEL to the HTTP client loggers."""
    level = _env_level("POLL_HTTP_LOG_LEVEL", "WARNING")
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger with a stream handler.

    The first time a logger is created, a StreamHandler is attached and the
    HTTP client loggers are quieted. Subsequent calls reuse the existing
    configuration.
    """
    logger = logging.getLogger(name if name else "poll_auditor")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_env_level("POLL_LOG_LEVEL", "INFO"))
        quiet_http_loggers()

    return logger
