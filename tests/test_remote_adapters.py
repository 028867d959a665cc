"""
Tests for the cart and wishlist remote adapters
"""

from decimal import Decimal
from unittest.mock import AsyncMock, call

import pytest

from cartsync.cart.remote import CartRemoteAdapter
from cartsync.errors import ERROR_INVALID_RESPONSE, GatewayError
from cartsync.gateway import RemoteGateway
from cartsync.wishlist.remote import WishlistRemoteAdapter
from conftest import cart_payload, wishlist_payload


@pytest.fixture
def gateway():
    return AsyncMock(spec=RemoteGateway)


class TestCartRemoteAdapter:
    """Cart endpoints return the whole cart."""

    @pytest.mark.asyncio
    async def test_fetch_all_maps_snapshot(self, gateway):
        gateway.get.return_value = cart_payload([("p1", 2, 100), ("p2", 1, 250)], cart_id="cart-9")

        snapshot = await CartRemoteAdapter(gateway).fetch_all()

        gateway.get.assert_awaited_once_with("/cart")
        assert snapshot.remote_id == "cart-9"
        first = snapshot.items[0]
        assert first.item_id == "line-p1"
        assert first.product_id == "p1"
        assert first.quantity == 2
        assert first.unit_price == Decimal("100")
        assert first.total_price == Decimal("200")
        assert first.added_at == "2026-01-01T10:00:00.000Z"
        assert snapshot.items[1].product.title == "Product p2"

    @pytest.mark.asyncio
    async def test_add_posts_product_id_only(self, gateway):
        gateway.post.return_value = cart_payload([("p1", 1, 100)])

        snapshot = await CartRemoteAdapter(gateway).add("p1")

        gateway.post.assert_awaited_once_with("/cart", {"productId": "p1"})
        gateway.get.assert_not_awaited()
        assert [item.product_id for item in snapshot.items] == ["p1"]

    @pytest.mark.asyncio
    async def test_add_with_id_only_products_refetches(self, gateway):
        gateway.post.return_value = {
            "status": "success",
            "numOfCartItems": 1,
            "cartId": "cart-1",
            "data": {
                "_id": "cart-1",
                "products": [{"count": 1, "_id": "l1", "product": "p1", "price": 100}],
            },
        }
        gateway.get.return_value = cart_payload([("p1", 1, 100)])

        snapshot = await CartRemoteAdapter(gateway).add("p1")

        gateway.get.assert_awaited_once_with("/cart")
        assert snapshot.items[0].product.title == "Product p1"
        assert snapshot.items[0].quantity == 1

    @pytest.mark.asyncio
    async def test_add_without_cart_body_refetches(self, gateway):
        gateway.post.return_value = {
            "status": "success",
            "products": [{"count": 1, "_id": "l1", "product": "p1", "price": 100}],
        }
        gateway.get.return_value = cart_payload([("p1", 1, 100)])

        snapshot = await CartRemoteAdapter(gateway).add("p1")

        gateway.get.assert_awaited_once()
        assert [item.product_id for item in snapshot.items] == ["p1"]

    @pytest.mark.asyncio
    async def test_id_only_products_parsed_on_other_responses(self, gateway):
        gateway.delete.return_value = {
            "status": "success",
            "data": {
                "_id": "cart-1",
                "products": [{"count": 2, "_id": "l2", "product": "p2", "price": "49.5"}],
            },
        }

        snapshot = await CartRemoteAdapter(gateway).remove("p1")

        assert snapshot.items[0].product_id == "p2"
        assert snapshot.items[0].total_price == Decimal("99")

    @pytest.mark.asyncio
    async def test_update_sends_count_as_string(self, gateway):
        gateway.put.return_value = cart_payload([("p1", 5, 100)])

        snapshot = await CartRemoteAdapter(gateway).update("p1", 5)

        gateway.put.assert_awaited_once_with("/cart/p1", {"count": "5"})
        assert snapshot.items[0].quantity == 5

    @pytest.mark.asyncio
    async def test_remove(self, gateway):
        gateway.delete.return_value = cart_payload([])

        snapshot = await CartRemoteAdapter(gateway).remove("p1")

        gateway.delete.assert_awaited_once_with("/cart/p1")
        assert snapshot.items == []

    @pytest.mark.asyncio
    async def test_clear(self, gateway):
        gateway.delete.return_value = {"message": "success"}

        snapshot = await CartRemoteAdapter(gateway).clear()

        gateway.delete.assert_awaited_once_with("/cart")
        assert snapshot.items == []
        assert snapshot.remote_id is None

    @pytest.mark.asyncio
    async def test_invalid_body_raises(self, gateway):
        gateway.get.return_value = {"status": "success", "data": {"products": "nope"}}

        with pytest.raises(GatewayError) as exc_info:
            await CartRemoteAdapter(gateway).fetch_all()
        assert exc_info.value.message == ERROR_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_gateway_errors_propagate(self, gateway):
        gateway.post.side_effect = GatewayError("Server error", 500)

        with pytest.raises(GatewayError):
            await CartRemoteAdapter(gateway).add("p1")


class TestWishlistRemoteAdapter:
    """Wishlist mutations return ids only and must be followed by a fetch."""

    @pytest.mark.asyncio
    async def test_fetch_all(self, gateway):
        gateway.get.return_value = wishlist_payload(["p1", "p2"])

        snapshot = await WishlistRemoteAdapter(gateway).fetch_all()

        assert [product.id for product in snapshot.items] == ["p1", "p2"]
        assert snapshot.items[0].price == Decimal("100")

    @pytest.mark.asyncio
    async def test_add_refetches(self, gateway):
        gateway.post.return_value = {"status": "success", "data": ["p1"]}
        gateway.get.return_value = wishlist_payload(["p1"])

        snapshot = await WishlistRemoteAdapter(gateway).add("p1")

        gateway.post.assert_awaited_once_with("/wishlist", {"productId": "p1"})
        gateway.get.assert_awaited_once_with("/wishlist")
        assert snapshot.items[0].title == "Product p1"

    @pytest.mark.asyncio
    async def test_remove_refetches(self, gateway):
        gateway.delete.return_value = {"status": "success", "data": []}
        gateway.get.return_value = wishlist_payload([])

        snapshot = await WishlistRemoteAdapter(gateway).remove("p1")

        gateway.delete.assert_awaited_once_with("/wishlist/p1")
        gateway.get.assert_awaited_once()
        assert snapshot.items == []

    @pytest.mark.asyncio
    async def test_id_only_entries_skipped(self, gateway):
        gateway.get.return_value = {"status": "success", "count": 1, "data": ["p1"]}

        snapshot = await WishlistRemoteAdapter(gateway).fetch_all()
        assert snapshot.items == []

    @pytest.mark.asyncio
    async def test_clear_deletes_each_entry(self, gateway):
        gateway.get.side_effect = [wishlist_payload(["p1", "p2"]), wishlist_payload([])]

        snapshot = await WishlistRemoteAdapter(gateway).clear()

        assert gateway.delete.await_args_list == [call("/wishlist/p1"), call("/wishlist/p2")]
        assert gateway.get.await_count == 2
        assert snapshot.items == []
