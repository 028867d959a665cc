"""
Persistent Store - durable key-value storage for guest collections

Provides:
- PersistentStore protocol (get/set/remove by string key)
- MemoryStore for tests and single-process embedding
- RedisStore backed by Upstash Redis (REST, async)
- Storage keys and retention windows per collection domain
"""

from typing import Dict, Optional, Protocol

from upstash_redis.asyncio import Redis as AsyncRedis

from cartsync.config import Settings, get_settings
from cartsync.errors import StorageError
from cartsync.logging import get_logger

logger = get_logger(__name__)


class StorageKeys:
    """Storage keys for the persisted guest records."""

    CART = "cart"
    WISHLIST = "wishlist"

    @staticmethod
    def key(prefix: str, domain: str) -> str:
        return f"{prefix}_{domain}" if prefix else domain


class TTL:
    """Retention windows (in seconds) for persisted guest records."""

    CART = 86400  # 24 hours
    WISHLIST = 2592000  # 30 days


class PersistentStore(Protocol):
    """Durable string key-value store."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None: ...

    async def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-process store. Values survive as long as the instance does."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        # TTL is not enforced here; the persistence adapter checks record age itself
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class RedisStore:
    """
    Upstash Redis backed store.

    Keys expire after the retention window passed as `ttl`, so abandoned guest
    records do not pile up server-side.
    """

    def __init__(self, client: AsyncRedis) -> None:
        self.client = client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(key)
        except Exception as e:
            raise StorageError(f"Redis get failed for {key}: {e}") from e
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        try:
            if ttl:
                await self.client.set(key, value, ex=ttl)
            else:
                await self.client.set(key, value)
        except Exception as e:
            raise StorageError(f"Redis set failed for {key}: {e}") from e

    async def remove(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except Exception as e:
            raise StorageError(f"Redis delete failed for {key}: {e}") from e


_redis_client: Optional[AsyncRedis] = None


def get_redis(settings: Optional[Settings] = None) -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN.
    """
    global _redis_client

    if _redis_client is None:
        settings = settings or get_settings()
        if not settings.redis_url or not settings.redis_token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


def create_store(settings: Optional[Settings] = None) -> PersistentStore:
    """Build the Persistent Store selected by CARTSYNC_STORAGE_BACKEND."""
    settings = settings or get_settings()
    if settings.storage_backend == "redis":
        logger.info("Using Upstash Redis for guest storage")
        return RedisStore(get_redis(settings))
    return MemoryStore()
