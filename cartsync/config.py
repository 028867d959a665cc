"""
Runtime configuration.

All settings come from environment variables; nothing here talks to the network.
"""

import os
from dataclasses import dataclass
from typing import Optional

from cartsync.logging import get_logger

logger = get_logger(__name__)

DEFAULT_API_URL = "https://ecommerce.routemisr.com/api/v1"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_READ_TIMEOUT = 15.0
DEFAULT_KEY_PREFIX = "freshcart"

STORAGE_BACKENDS = ("memory", "redis")


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, using default %s", name, default)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for the sync engine."""

    api_url: str = DEFAULT_API_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    storage_backend: str = "memory"
    key_prefix: str = DEFAULT_KEY_PREFIX
    redis_url: str = ""
    redis_token: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        backend = os.environ.get("CARTSYNC_STORAGE_BACKEND", "memory").strip().lower()
        if backend not in STORAGE_BACKENDS:
            logger.warning("Unknown storage backend %r, using memory", backend)
            backend = "memory"

        return cls(
            api_url=os.environ.get("CARTSYNC_API_URL", DEFAULT_API_URL).rstrip("/"),
            request_timeout=_float_env("CARTSYNC_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            read_timeout=_float_env("CARTSYNC_READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
            storage_backend=backend,
            key_prefix=os.environ.get("CARTSYNC_KEY_PREFIX", DEFAULT_KEY_PREFIX),
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get Settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
