"""
Wiring for an embedding application.

Builds both stores on one session, gateway and Persistent Store, initializes
them and attaches the Synchronization Coordinator to the session.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional

from cartsync.cart.remote import CartRemoteAdapter
from cartsync.cart.store import CartStore, cart_persistence
from cartsync.config import Settings, get_settings
from cartsync.gateway import RemoteGateway
from cartsync.logging import get_logger
from cartsync.session import AuthSession
from cartsync.storage import PersistentStore, create_store
from cartsync.sync import SyncCoordinator
from cartsync.wishlist.remote import WishlistRemoteAdapter
from cartsync.wishlist.store import WishlistStore, wishlist_persistence

logger = get_logger(__name__)


@dataclass
class Storefront:
    """Everything an application needs to drive the cart and the wishlist."""
    session: AuthSession
    cart: CartStore
    wishlist: WishlistStore
    coordinator: SyncCoordinator
    gateway: RemoteGateway
    detach: Callable[[], None]

    async def aclose(self) -> None:
        self.detach()
        await self.gateway.aclose()


async def create_storefront(
    session: Optional[AuthSession] = None,
    store: Optional[PersistentStore] = None,
    gateway: Optional[RemoteGateway] = None,
    settings: Optional[Settings] = None,
    clock: Callable[[], float] = time.time,
) -> Storefront:
    settings = settings or get_settings()
    session = session or AuthSession()
    store = store or create_store(settings)
    gateway = gateway or RemoteGateway.from_settings(lambda: session.token, settings)

    cart = CartStore(
        session,
        cart_persistence(store, session, settings.key_prefix, clock),
        CartRemoteAdapter(gateway),
        clock=clock,
    )
    wishlist = WishlistStore(
        session,
        wishlist_persistence(store, session, settings.key_prefix, clock),
        WishlistRemoteAdapter(gateway),
        clock=clock,
    )
    await asyncio.gather(cart.initialize(), wishlist.initialize())

    coordinator = SyncCoordinator([cart, wishlist])
    detach = coordinator.attach(session)
    logger.info("Storefront ready (authenticated=%s)", session.is_authenticated)

    return Storefront(
        session=session,
        cart=cart,
        wishlist=wishlist,
        coordinator=coordinator,
        gateway=gateway,
        detach=detach,
    )
