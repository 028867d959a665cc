"""
Persistence Adapter - guest collections in the Persistent Store

Each domain keeps one record under its own key:
    {"items": [...], "savedAtTimestamp": <epoch ms>, "ownerId": <user id or null>}

A record is only trusted when its owner matches the current identity (or both
are absent) and it is not older than the domain's retention window. Anything
else is deleted on load and reported as an empty collection.
"""

import time
from typing import Callable, Generic, List, Optional, TypeVar

from cartsync.logging import get_logger, sanitize_id_for_logging
from cartsync.schemas import PersistedRecord
from cartsync.storage import PersistentStore

logger = get_logger(__name__)

T = TypeVar("T")


class GuestPersistence(Generic[T]):
    """Saves, loads and clears the guest record for one collection domain."""

    def __init__(
        self,
        store: PersistentStore,
        key: str,
        max_age_seconds: int,
        serialize: Callable[[T], dict],
        deserialize: Callable[[dict], T],
        owner_provider: Callable[[], Optional[str]],
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.key = key
        self.max_age_seconds = max_age_seconds
        self._serialize = serialize
        self._deserialize = deserialize
        self._owner_provider = owner_provider
        self._clock = clock

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def save(self, items: List[T]) -> bool:
        """
        Write the full item list.

        Returns:
            True if written. Failures are logged, never raised.
        """
        try:
            record = PersistedRecord(
                items=[self._serialize(item) for item in items],
                savedAtTimestamp=self.now_ms(),
                ownerId=self._owner_provider(),
            )
            await self.store.set(self.key, record.model_dump_json(), ttl=self.max_age_seconds)
            return True
        except Exception as e:
            logger.warning("Failed to save %s to storage: %s", self.key, e)
            return False

    async def load(self) -> List[T]:
        """Read the record; stale, foreign or malformed records yield []."""
        try:
            raw = await self.store.get(self.key)
        except Exception as e:
            logger.warning("Failed to read %s from storage: %s", self.key, e)
            return []

        if not raw:
            return []

        try:
            record = PersistedRecord.model_validate_json(raw)
            items = [self._deserialize(data) for data in record.items]
        except (ValueError, KeyError, TypeError) as e:
            return await self._discard(f"malformed record ({type(e).__name__})")

        owner = self._owner_provider()
        if record.ownerId != owner:
            return await self._discard(
                f"owned by {sanitize_id_for_logging(record.ownerId)}, "
                f"current identity {sanitize_id_for_logging(owner)}"
            )

        age_ms = self.now_ms() - record.savedAtTimestamp
        if age_ms > self.max_age_seconds * 1000:
            return await self._discard(f"expired ({age_ms / 3600000:.1f}h old)")

        return items

    async def clear(self) -> bool:
        """Delete the record. Failures are logged, never raised."""
        try:
            await self.store.remove(self.key)
            return True
        except Exception as e:
            logger.warning("Failed to clear %s from storage: %s", self.key, e)
            return False

    async def _discard(self, reason: str) -> List[T]:
        logger.info("Discarding guest record %s: %s", self.key, reason)
        await self.clear()
        return []
