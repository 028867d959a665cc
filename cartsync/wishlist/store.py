"""
Wishlist Store - saved products for guests and signed-in users

Guest wishlists are kept for 30 days. Signed-in wishlists are re-read from the
server after every change. Adds and removes publish a notice to subscribers.
"""

import time
from typing import Callable

from cartsync.collection.models import ProductSnapshot
from cartsync.collection.persistence import GuestPersistence
from cartsync.collection.store import CollectionStore
from cartsync.collection.strategy import RemoteStrategy
from cartsync.errors import (
    ERROR_WISHLIST_ADD,
    ERROR_WISHLIST_CLEAR,
    ERROR_WISHLIST_LOAD,
    ERROR_WISHLIST_REMOVE,
)
from cartsync.logging import get_logger
from cartsync.session import AuthSession
from cartsync.storage import TTL, PersistentStore, StorageKeys
from cartsync.wishlist.strategies import LocalWishlistStrategy

logger = get_logger(__name__)


def wishlist_persistence(
    store: PersistentStore,
    session: AuthSession,
    key_prefix: str = "freshcart",
    clock: Callable[[], float] = time.time,
) -> GuestPersistence[ProductSnapshot]:
    """Persistence adapter for the guest wishlist record."""
    return GuestPersistence(
        store,
        StorageKeys.key(key_prefix, StorageKeys.WISHLIST),
        TTL.WISHLIST,
        serialize=ProductSnapshot.to_dict,
        deserialize=ProductSnapshot.from_dict,
        owner_provider=session.current_user_id,
        clock=clock,
    )


class WishlistStore(CollectionStore[ProductSnapshot]):
    """Wishlist state store."""

    domain = "wishlist"
    load_error = ERROR_WISHLIST_LOAD
    add_error = ERROR_WISHLIST_ADD
    remove_error = ERROR_WISHLIST_REMOVE
    clear_error_message = ERROR_WISHLIST_CLEAR

    def _build_local_strategy(self) -> LocalWishlistStrategy:
        return LocalWishlistStrategy(self.persistence)

    def _build_remote_strategy(self) -> RemoteStrategy[ProductSnapshot]:
        return RemoteStrategy(self.remote)

    async def add_item(self, product: ProductSnapshot, quantity: int = 1) -> bool:
        """Add a product. A guest adding a saved product only gets an info notice."""
        if not self.state.is_authenticated and self.contains(product.id):
            self._notice("info", "Already in Wishlist", f"{product.title} is already in your wishlist")
            return True

        ok = await super().add_item(product, quantity)
        if ok:
            self._notice("success", "Added to Wishlist", f"{product.title} has been added to your wishlist")
        else:
            self._notice("error", "Error", self.state.error or ERROR_WISHLIST_ADD)
        return ok

    async def remove_item(self, product_id: str) -> bool:
        if not self.contains(product_id):
            return True

        ok = await super().remove_item(product_id)
        if ok:
            self._notice("success", "Removed from Wishlist", "Product has been removed from your wishlist")
        else:
            self._notice("error", "Error", self.state.error or ERROR_WISHLIST_REMOVE)
        return ok

    async def toggle(self, product: ProductSnapshot) -> bool:
        """Remove the product if saved, otherwise add it."""
        if self.contains(product.id):
            return await self.remove_item(product.id)
        return await self.add_item(product)
