"""
Synchronization Coordinator - reconciles stores on login and logout

Guest -> Authenticated (merge):
    every guest item is pushed to the server concurrently, the guest record
    is deleted and the server collection is fetched and installed. Failed
    pushes are only counted ("Failed to sync N of M items"); they are not
    retried or kept anywhere.

Authenticated -> Guest (teardown):
    items and the remote collection id are dropped, then whatever guest
    record exists is loaded again.
"""

import asyncio
from typing import Callable, List, Sequence

from cartsync.collection.store import CollectionStore
from cartsync.errors import ERROR_SYNC_RELOAD, describe_error, sync_failure_message
from cartsync.logging import get_logger
from cartsync.session import AuthSession

logger = get_logger(__name__)


class SyncCoordinator:
    """Drives the guest/authenticated state machine for a set of stores."""

    def __init__(self, stores: Sequence[CollectionStore]):
        self.stores: List[CollectionStore] = list(stores)

    def attach(self, session: AuthSession) -> Callable[[], None]:
        """Follow `session` login/logout events. Returns an unsubscribe function."""
        return session.subscribe(self.on_authentication_change)

    async def on_authentication_change(self, is_authenticated: bool) -> None:
        await asyncio.gather(*(self._transition(store, is_authenticated) for store in self.stores))

    async def _transition(self, store: CollectionStore, is_authenticated: bool) -> None:
        was_authenticated = store.set_authenticated(is_authenticated)
        if was_authenticated == is_authenticated:
            return
        if is_authenticated:
            await self.merge(store)
        else:
            await self.teardown(store)

    async def merge(self, store: CollectionStore) -> None:
        """Push guest items to the server and install the server's collection."""
        guest_items = store.items
        store.begin_sync()

        failed = 0
        if guest_items:
            results = await asyncio.gather(
                *(self._push(store, item.product_id) for item in guest_items),
                return_exceptions=True,
            )
            failed = sum(1 for result in results if isinstance(result, Exception))
            logger.info(
                "Merged %s: %d of %d guest items pushed",
                store.domain, len(guest_items) - failed, len(guest_items),
            )

        error = sync_failure_message(failed, len(guest_items)) if failed else None

        await store.persistence.clear()

        try:
            snapshot = await store.remote.fetch_all()
        except Exception as e:
            logger.error("Failed to reload %s after merge: %s", store.domain, e)
            store.finish_sync(None, error or f"{ERROR_SYNC_RELOAD} {store.domain}")
            return

        store.finish_sync(snapshot, error)

    async def _push(self, store: CollectionStore, product_id: str) -> None:
        async with store.track_pending(product_id):
            try:
                await store.remote.add(product_id)
            except Exception as e:
                logger.warning("Failed to sync %s item: %s", store.domain, describe_error(e, "unknown"))
                raise

    async def teardown(self, store: CollectionStore) -> None:
        """Drop the signed-in collection and fall back to the guest record."""
        store.reset()
        items = await store.persistence.load()
        store.replace_items(items)
        logger.info("Restored %d guest %s items after logout", len(items), store.domain)
