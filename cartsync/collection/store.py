"""
Collection Store - canonical in-memory state for one collection domain

Features:
- Guest vs authenticated behaviour through LocalStrategy / RemoteStrategy
- Per-product pending markers while a mutation is in flight
- Derived aggregates computed from the current items on every read
- Change notifications to subscribers after every state update
- Failures are recorded in state.error, never raised to the caller
"""

import time
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import AsyncIterator, Awaitable, Callable, Generic, List, Optional, TypeVar

from cartsync.collection.models import (
    CollectionState,
    CollectionSummary,
    ProductSnapshot,
    Snapshot,
    items_count_label,
)
from cartsync.collection.persistence import GuestPersistence
from cartsync.collection.strategy import CollectionStrategy, RemoteCollection
from cartsync.errors import describe_error
from cartsync.logging import get_logger, sanitize_id_for_logging
from cartsync.session import AuthSession

logger = get_logger(__name__)

T = TypeVar("T")

BADGE_LIMIT = 99


@dataclass
class Notice:
    """Short user-facing message (toast) published by a store."""
    severity: str  # "success" | "info" | "error"
    summary: str
    detail: str = ""


StateListener = Callable[[CollectionState], None]
NoticeListener = Callable[[Notice], None]


class CollectionStore(ABC, Generic[T]):
    """
    Base store shared by the cart and the wishlist.

    Subclasses provide the two strategies and the domain's error messages.

    Usage:
        store = await CartStore.create(session, persistence, remote)
        await store.add_item(product)
        store.total_price
    """

    domain = "collection"
    load_error = "Failed to load"
    add_error = "Failed to add"
    remove_error = "Failed to remove"
    clear_error_message = "Failed to clear"

    def __init__(
        self,
        session: AuthSession,
        persistence: GuestPersistence[T],
        remote: RemoteCollection[T],
        clock: Callable[[], float] = time.time,
    ):
        self.session = session
        self.persistence = persistence
        self.remote = remote
        self.state: CollectionState[T] = CollectionState()
        self._clock = clock
        self._listeners: List[StateListener] = []
        self._notice_listeners: List[NoticeListener] = []
        self._initialized = False
        self._local_strategy = self._build_local_strategy()
        self._remote_strategy = self._build_remote_strategy()

    @classmethod
    async def create(cls, *args, **kwargs):
        """Build the store and run its one-time initialization."""
        store = cls(*args, **kwargs)
        await store.initialize()
        return store

    # ==================== STRATEGIES ====================

    @abstractmethod
    def _build_local_strategy(self) -> CollectionStrategy[T]:
        ...

    @abstractmethod
    def _build_remote_strategy(self) -> CollectionStrategy[T]:
        ...

    @property
    def strategy(self) -> CollectionStrategy[T]:
        if self.state.is_authenticated:
            return self._remote_strategy
        return self._local_strategy

    # ==================== NOTIFICATIONS ====================

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener(state)` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def subscribe_notices(self, listener: NoticeListener) -> Callable[[], None]:
        self._notice_listeners.append(listener)
        return lambda: (
            self._notice_listeners.remove(listener) if listener in self._notice_listeners else None
        )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("%s state listener failed", self.domain)

    def _notice(self, severity: str, summary: str, detail: str = "") -> None:
        notice = Notice(severity=severity, summary=summary, detail=detail)
        for listener in list(self._notice_listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception("%s notice listener failed", self.domain)

    def _patch(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self.state, name, value)
        if "items" in changes:
            self.state.last_updated = self._clock()
        self._notify()

    # ==================== LIFECYCLE ====================

    async def initialize(self) -> None:
        """Load the collection from the server or from guest storage. Runs once."""
        if self._initialized:
            return
        self._initialized = True

        is_authenticated = self.session.is_authenticated
        self._patch(is_authenticated=is_authenticated)

        if is_authenticated:
            await self.load_from_remote()
        else:
            snapshot = await self._local_strategy.load()
            self._patch(items=snapshot.items, error=None)
            logger.info("Loaded %d guest %s items", len(snapshot.items), self.domain)

    async def load_from_remote(self) -> None:
        """Replace the collection with a fresh server snapshot (authenticated only)."""
        if not self.state.is_authenticated:
            return
        self._patch(is_loading=True, error=None)
        try:
            snapshot = await self._remote_strategy.load()
        except Exception as e:
            logger.error("Failed to load %s: %s", self.domain, e)
            self._patch(error=describe_error(e, self.load_error), is_loading=False)
            return
        self._patch(items=snapshot.items, remote_id=snapshot.remote_id, is_loading=False, error=None)

    # ==================== PENDING MARKERS ====================

    @asynccontextmanager
    async def track_pending(self, product_id: str) -> AsyncIterator[None]:
        """Mark `product_id` as in flight for the duration of the block."""
        self.state.pending_ids.add(product_id)
        self._notify()
        try:
            yield
        finally:
            self.state.pending_ids.discard(product_id)
            self._notify()

    # ==================== MUTATIONS ====================

    async def _mutate(
        self,
        fallback_error: str,
        operation: Callable[[CollectionStrategy[T]], Awaitable[Optional[Snapshot[T]]]],
    ) -> bool:
        """
        Run one strategy operation and install its result.

        Returns:
            True if the operation settled successfully (including no-ops)
        """
        strategy = self.strategy
        try:
            snapshot = await operation(strategy)
        except Exception as e:
            logger.error("%s operation failed: %s", self.domain, e)
            self._patch(error=describe_error(e, fallback_error))
            return False

        if snapshot is None:
            return True

        self._patch(items=snapshot.items, remote_id=snapshot.remote_id, error=None)
        await strategy.commit(snapshot.items)
        return True

    async def add_item(self, product: ProductSnapshot, quantity: int = 1) -> bool:
        logger.debug("Adding %s to %s", sanitize_id_for_logging(product.id), self.domain)
        async with self.track_pending(product.id):
            return await self._mutate(
                self.add_error,
                lambda strategy: strategy.add(list(self.state.items), product, quantity),
            )

    async def remove_item(self, product_id: str) -> bool:
        """Remove a product. Removing an absent product changes nothing."""
        if not self.contains(product_id):
            return True
        async with self.track_pending(product_id):
            return await self._mutate(
                self.remove_error,
                lambda strategy: strategy.remove(list(self.state.items), product_id),
            )

    async def clear(self) -> bool:
        return await self._mutate(
            self.clear_error_message,
            lambda strategy: strategy.clear(list(self.state.items)),
        )

    def clear_error(self) -> None:
        self._patch(error=None)

    # ==================== SYNC HOOKS ====================

    def set_authenticated(self, is_authenticated: bool) -> bool:
        """Record the new mode. Returns the previous one."""
        was_authenticated = self.state.is_authenticated
        self._patch(is_authenticated=is_authenticated)
        return was_authenticated

    def begin_sync(self) -> None:
        self._patch(is_syncing=True, error=None)

    def finish_sync(self, snapshot: Optional[Snapshot[T]], error: Optional[str]) -> None:
        if snapshot is None:
            self._patch(is_syncing=False, error=error)
            return
        self._patch(
            items=snapshot.items,
            remote_id=snapshot.remote_id,
            is_syncing=False,
            error=error,
        )

    def reset(self) -> None:
        """Drop items and the remote collection id (used on logout)."""
        self._patch(items=[], remote_id=None, error=None)

    def replace_items(self, items: List[T]) -> None:
        self._patch(items=items)

    # ==================== DERIVED STATE ====================

    @property
    def items(self) -> List[T]:
        return list(self.state.items)

    @property
    def total_items(self) -> int:
        return len(self.state.items)

    @property
    def total_price(self) -> Decimal:
        return Decimal("0")

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0

    @property
    def badge_count(self) -> str:
        count = self.total_items
        return f"{BADGE_LIMIT}+" if count > BADGE_LIMIT else str(count)

    @property
    def has_error(self) -> bool:
        return self.state.error is not None

    @property
    def is_operating(self) -> bool:
        return self.state.is_loading or self.state.is_syncing

    def contains(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.state.items)

    def quantity_of(self, product_id: str) -> int:
        return 1 if self.contains(product_id) else 0

    def is_pending(self, product_id: str) -> bool:
        return product_id in self.state.pending_ids

    def summary(self) -> CollectionSummary:
        total_items = self.total_items
        return CollectionSummary(
            total_items=total_items,
            total_price=self.total_price,
            is_empty=total_items == 0,
            items_count=items_count_label(total_items),
        )
