"""Wishlist domain."""

from cartsync.wishlist.remote import WishlistRemoteAdapter
from cartsync.wishlist.store import WishlistStore, wishlist_persistence

__all__ = ["WishlistRemoteAdapter", "WishlistStore", "wishlist_persistence"]
