"""Cart strategies: quantity-aware guest mutations and the remote update call."""

from typing import List, Optional

from cartsync.cart.models import CartItem
from cartsync.cart.remote import CartRemoteAdapter
from cartsync.collection.models import ProductSnapshot, Snapshot
from cartsync.collection.strategy import LocalStrategy, RemoteStrategy


class LocalCartStrategy(LocalStrategy[CartItem]):
    """Guest cart kept in the Persistent Store."""

    async def add(self, items: List[CartItem], product: ProductSnapshot, quantity: int) -> Optional[Snapshot[CartItem]]:
        if not isinstance(quantity, int) or quantity < 1:
            raise ValueError("quantity must be a positive integer")

        for index, item in enumerate(items):
            if item.product_id == product.id:
                updated = list(items)
                updated[index] = item.with_quantity(item.quantity + quantity)
                return Snapshot(items=updated)

        now_ms = self.persistence.now_ms()
        return Snapshot(items=items + [CartItem.from_product(product, quantity, now_ms=now_ms)])

    async def update(self, items: List[CartItem], product_id: str, quantity: int) -> Optional[Snapshot[CartItem]]:
        """Set the quantity of a line; zero or less removes it."""
        if quantity <= 0:
            return await self.remove(items, product_id)

        if all(item.product_id != product_id for item in items):
            return None
        return Snapshot(items=[
            item.with_quantity(quantity) if item.product_id == product_id else item
            for item in items
        ])


class RemoteCartStrategy(RemoteStrategy[CartItem]):
    """Authenticated cart: the server decides what a given quantity means."""

    remote: CartRemoteAdapter

    async def update(self, items: List[CartItem], product_id: str, quantity: int) -> Optional[Snapshot[CartItem]]:
        return await self.remote.update(product_id, quantity)
