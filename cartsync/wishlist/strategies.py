"""Wishlist strategies. Entries are products; there is no quantity."""

from typing import List, Optional

from cartsync.collection.models import ProductSnapshot, Snapshot
from cartsync.collection.strategy import LocalStrategy


class LocalWishlistStrategy(LocalStrategy[ProductSnapshot]):
    """Guest wishlist kept in the Persistent Store."""

    async def add(
        self,
        items: List[ProductSnapshot],
        product: ProductSnapshot,
        quantity: int,
    ) -> Optional[Snapshot[ProductSnapshot]]:
        if any(item.id == product.id for item in items):
            return None
        return Snapshot(items=items + [product])
