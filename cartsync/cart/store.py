"""
Cart Store - canonical cart state for guests and signed-in users

Features:
- Quantity-aware guest cart persisted for 24 hours
- Authenticated cart mirrored from the server's full snapshot
- Decimal totals derived from item quantities and captured unit prices
"""

import time
from decimal import Decimal
from typing import Callable, Optional

from cartsync.cart.models import CartItem
from cartsync.cart.remote import CartRemoteAdapter
from cartsync.cart.strategies import LocalCartStrategy, RemoteCartStrategy
from cartsync.collection.persistence import GuestPersistence
from cartsync.collection.store import CollectionStore
from cartsync.errors import (
    ERROR_CART_ADD,
    ERROR_CART_CLEAR,
    ERROR_CART_LOAD,
    ERROR_CART_REMOVE,
    ERROR_CART_UPDATE,
)
from cartsync.logging import get_logger, sanitize_id_for_logging
from cartsync.money import format_money
from cartsync.session import AuthSession
from cartsync.storage import TTL, PersistentStore, StorageKeys

logger = get_logger(__name__)


def cart_persistence(
    store: PersistentStore,
    session: AuthSession,
    key_prefix: str = "freshcart",
    clock: Callable[[], float] = time.time,
) -> GuestPersistence[CartItem]:
    """Persistence adapter for the guest cart record."""
    return GuestPersistence(
        store,
        StorageKeys.key(key_prefix, StorageKeys.CART),
        TTL.CART,
        serialize=CartItem.to_dict,
        deserialize=CartItem.from_dict,
        owner_provider=session.current_user_id,
        clock=clock,
    )


class CartStore(CollectionStore[CartItem]):
    """Shopping cart state store."""

    domain = "cart"
    load_error = ERROR_CART_LOAD
    add_error = ERROR_CART_ADD
    remove_error = ERROR_CART_REMOVE
    clear_error_message = ERROR_CART_CLEAR

    remote: CartRemoteAdapter

    def _build_local_strategy(self) -> LocalCartStrategy:
        return LocalCartStrategy(self.persistence)

    def _build_remote_strategy(self) -> RemoteCartStrategy:
        return RemoteCartStrategy(self.remote)

    async def update_item(self, product_id: str, quantity: int) -> bool:
        """
        Set the quantity of a cart line.

        Guests: quantity <= 0 removes the line, unknown ids change nothing.
        Signed in: the quantity is sent as-is and the server's cart is installed.
        """
        logger.debug("Updating %s to %d", sanitize_id_for_logging(product_id), quantity)
        async with self.track_pending(product_id):
            return await self._mutate(
                ERROR_CART_UPDATE,
                lambda strategy: strategy.update(list(self.state.items), product_id, quantity),
            )

    # ==================== DERIVED STATE ====================

    @property
    def total_items(self) -> int:
        """Sum of quantities across all lines."""
        return sum(item.quantity for item in self.state.items)

    @property
    def total_price(self) -> Decimal:
        return sum((item.total_price for item in self.state.items), Decimal("0"))

    @property
    def formatted_total_price(self) -> str:
        return format_money(self.total_price)

    def find_item(self, product_id: str) -> Optional[CartItem]:
        for item in self.state.items:
            if item.product_id == product_id:
                return item
        return None

    def quantity_of(self, product_id: str) -> int:
        item = self.find_item(product_id)
        return item.quantity if item else 0
