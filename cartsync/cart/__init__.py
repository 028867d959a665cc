"""Cart domain."""

from cartsync.cart.models import CartItem
from cartsync.cart.remote import CartRemoteAdapter
from cartsync.cart.store import CartStore, cart_persistence

__all__ = ["CartItem", "CartRemoteAdapter", "CartStore", "cart_persistence"]
