"""
cartsync - cart and wishlist state for guests and signed-in shoppers.

Guest collections live in a Persistent Store; signed-in collections mirror the
remote API. Logging in merges the guest collection into the server one.
"""

from cartsync.cart import CartItem, CartStore
from cartsync.collection import Notice, ProductSnapshot
from cartsync.factory import Storefront, create_storefront
from cartsync.session import AuthSession
from cartsync.sync import SyncCoordinator
from cartsync.wishlist import WishlistStore

__version__ = "0.1.0"

__all__ = [
    "AuthSession",
    "CartItem",
    "CartStore",
    "Notice",
    "ProductSnapshot",
    "Storefront",
    "SyncCoordinator",
    "WishlistStore",
    "create_storefront",
]
