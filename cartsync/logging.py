"""
Logging for cartsync.

Only the `cartsync` logger is configured, never the root logger, so an
embedding application keeps control of its own handlers. When the
application has configured logging already, cartsync records simply
propagate to it.

Usage:
    from cartsync.logging import get_logger
    logger = get_logger(__name__)

Level: CARTSYNC_LOG_LEVEL, else LOG_LEVEL, else INFO.
"""

import logging
import os
import sys
from functools import cache
from typing import Optional

PACKAGE_LOGGER = "cartsync"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level_from_env() -> int:
    level_name = os.environ.get("CARTSYNC_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or "INFO"
    return getattr(logging, level_name.upper(), logging.INFO)


def configure_logging(level: Optional[int] = None) -> logging.Logger:
    """
    Set the package level and attach a stdout handler if nobody else logs.

    Safe to call more than once; a handler is added at most once.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level if level is not None else _level_from_env())

    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    # Per-request lines from the gateway's httpx client
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    return package_logger


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger under the `cartsync` namespace (module `__name__` is expected)."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: Optional[str]) -> str:
    """Product or user id cut to 8 chars with line breaks escaped; "N/A" when empty."""
    if not id_value:
        return "N/A"
    safe_value = str(id_value).replace("\r", "\\r").replace("\n", "\\n").replace("\x00", "")
    return safe_value[:8]


__all__ = [
    "LOG_FORMAT",
    "PACKAGE_LOGGER",
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
]
