"""Pytest configuration and fixtures"""
import os
from decimal import Decimal
from typing import List, Optional, Tuple
from unittest.mock import AsyncMock

import pytest

os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("CARTSYNC_STORAGE_BACKEND", "memory")

from cartsync.cart.models import CartItem
from cartsync.cart.remote import CartRemoteAdapter
from cartsync.cart.store import CartStore, cart_persistence
from cartsync.collection.models import ProductSnapshot, Snapshot
from cartsync.session import AuthSession
from cartsync.storage import MemoryStore
from cartsync.wishlist.remote import WishlistRemoteAdapter
from cartsync.wishlist.store import WishlistStore, wishlist_persistence

# 2026-01-01T00:00:00Z
START_TIME = 1767225600.0


class FakeClock:
    """Settable clock returning epoch seconds."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_product(
    product_id: str = "p1",
    price: str = "100",
    price_after_discount: Optional[str] = None,
    title: Optional[str] = None,
) -> ProductSnapshot:
    return ProductSnapshot(
        id=product_id,
        title=title or f"Product {product_id}",
        image_cover=f"https://cdn.test/{product_id}.jpg",
        stock_quantity=50,
        ratings_average=4.5,
        price=Decimal(price),
        price_after_discount=Decimal(price_after_discount) if price_after_discount else None,
    )


def product_payload(product_id: str, price: int = 100) -> dict:
    return {
        "_id": product_id,
        "id": product_id,
        "title": f"Product {product_id}",
        "imageCover": f"https://cdn.test/{product_id}.jpg",
        "quantity": 50,
        "ratingsAverage": 4.5,
        "price": price,
        "category": {"_id": "cat-1", "name": "Electronics"},
    }


def cart_payload(lines: List[Tuple[str, int, int]], cart_id: str = "cart-1") -> dict:
    """Build a cart response body from (product_id, count, price) tuples."""
    return {
        "status": "success",
        "numOfCartItems": len(lines),
        "cartId": cart_id,
        "data": {
            "_id": cart_id,
            "cartOwner": "user-1",
            "products": [
                {"count": count, "_id": f"line-{pid}", "product": product_payload(pid, price), "price": price}
                for pid, count, price in lines
            ],
            "createdAt": "2026-01-01T10:00:00.000Z",
            "updatedAt": "2026-01-01T11:00:00.000Z",
            "__v": 0,
            "totalCartPrice": sum(count * price for _, count, price in lines),
        },
    }


def wishlist_payload(product_ids: List[str]) -> dict:
    return {
        "status": "success",
        "count": len(product_ids),
        "data": [product_payload(pid) for pid in product_ids],
    }


def remote_cart_items(lines: List[Tuple[str, int, int]]) -> Snapshot:
    items = [
        CartItem(
            item_id=f"line-{pid}",
            product=make_product(pid, str(price)),
            quantity=count,
            unit_price=Decimal(price),
        )
        for pid, count, price in lines
    ]
    return Snapshot(items=items, remote_id="cart-1")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def guest_session():
    return AuthSession()


@pytest.fixture
def user_session():
    return AuthSession(token="jwt-token", user_id="user-1")


@pytest.fixture
def mock_cart_remote():
    """Cart remote adapter returning an empty server cart by default."""
    remote = AsyncMock(spec=CartRemoteAdapter)
    remote.fetch_all.return_value = Snapshot(items=[], remote_id="cart-1")
    return remote


@pytest.fixture
def mock_wishlist_remote():
    remote = AsyncMock(spec=WishlistRemoteAdapter)
    remote.fetch_all.return_value = Snapshot(items=[])
    return remote


@pytest.fixture
def guest_cart(guest_session, memory_store, mock_cart_remote, clock):
    """Uninitialized guest cart store."""
    return CartStore(
        guest_session,
        cart_persistence(memory_store, guest_session, clock=clock),
        mock_cart_remote,
        clock=clock,
    )


@pytest.fixture
def user_cart(user_session, memory_store, mock_cart_remote, clock):
    return CartStore(
        user_session,
        cart_persistence(memory_store, user_session, clock=clock),
        mock_cart_remote,
        clock=clock,
    )


@pytest.fixture
def guest_wishlist(guest_session, memory_store, mock_wishlist_remote, clock):
    return WishlistStore(
        guest_session,
        wishlist_persistence(memory_store, guest_session, clock=clock),
        mock_wishlist_remote,
        clock=clock,
    )


@pytest.fixture
def user_wishlist(user_session, memory_store, mock_wishlist_remote, clock):
    return WishlistStore(
        user_session,
        wishlist_persistence(memory_store, user_session, clock=clock),
        mock_wishlist_remote,
        clock=clock,
    )
