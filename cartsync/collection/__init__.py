"""Machinery shared by the cart and the wishlist."""

from cartsync.collection.models import (
    CollectionState,
    CollectionSummary,
    ProductSnapshot,
    Snapshot,
)
from cartsync.collection.persistence import GuestPersistence
from cartsync.collection.store import CollectionStore, Notice
from cartsync.collection.strategy import CollectionStrategy, LocalStrategy, RemoteStrategy

__all__ = [
    "CollectionState",
    "CollectionStore",
    "CollectionStrategy",
    "CollectionSummary",
    "GuestPersistence",
    "LocalStrategy",
    "Notice",
    "ProductSnapshot",
    "RemoteStrategy",
    "Snapshot",
]
