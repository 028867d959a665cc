"""
Cart remote adapter

Translates cart operations into Remote Gateway calls. Cart endpoints answer
with the whole cart, so each call returns an authoritative snapshot. The one
exception is a POST /cart body listing products as bare ids, which is
followed by GET /cart.
"""

from typing import Optional

from pydantic import ValidationError

from cartsync.cart.models import CartItem
from cartsync.collection.models import ProductSnapshot, Snapshot
from cartsync.errors import ERROR_INVALID_RESPONSE, GatewayError
from cartsync.gateway import RemoteGateway
from cartsync.logging import get_logger, sanitize_id_for_logging
from cartsync.schemas import CartApiResponse, CartProductEntry

logger = get_logger(__name__)

CART_PATH = "/cart"


def _entry_to_item(entry: CartProductEntry, created_at: Optional[str], updated_at: Optional[str]) -> CartItem:
    if isinstance(entry.product, str):
        product = ProductSnapshot(id=entry.product)
    else:
        product = ProductSnapshot.from_payload(entry.product)
    return CartItem(
        item_id=entry.id,
        product=product,
        quantity=entry.count,
        unit_price=entry.price,
        added_at=created_at or "",
        updated_at=updated_at or "",
    )


def _validate(body) -> CartApiResponse:
    try:
        return CartApiResponse.model_validate(body)
    except ValidationError as e:
        logger.warning("Invalid cart response: %s", e.error_count())
        raise GatewayError(ERROR_INVALID_RESPONSE) from e


def _to_snapshot(response: CartApiResponse) -> Snapshot[CartItem]:
    data = response.data
    if data is None:
        return Snapshot(items=[], remote_id=response.cartId)
    items = [_entry_to_item(entry, data.createdAt, data.updatedAt) for entry in data.products]
    return Snapshot(items=items, remote_id=response.cartId or data.id)


def _has_full_products(response: CartApiResponse) -> bool:
    return response.data is not None and all(
        not isinstance(entry.product, str) for entry in response.data.products
    )


def parse_cart_response(body) -> Snapshot[CartItem]:
    """Convert a cart response body into a snapshot."""
    if not body:
        return Snapshot(items=[])
    return _to_snapshot(_validate(body))


class CartRemoteAdapter:
    """Cart endpoints of the remote API."""

    def __init__(self, gateway: RemoteGateway):
        self.gateway = gateway

    async def fetch_all(self) -> Snapshot[CartItem]:
        return parse_cart_response(await self.gateway.get(CART_PATH))

    async def add(self, product_id: str) -> Snapshot[CartItem]:
        """
        Add one unit of the product (the endpoint takes no quantity).

        POST /cart may list products as bare ids; the cart is then re-read
        so the snapshot carries full product data.
        """
        body = await self.gateway.post(CART_PATH, {"productId": product_id})
        logger.debug("Added %s to remote cart", sanitize_id_for_logging(product_id))
        response = _validate(body) if body else None
        if response is None or not _has_full_products(response):
            return await self.fetch_all()
        return _to_snapshot(response)

    async def update(self, product_id: str, quantity: int) -> Snapshot[CartItem]:
        # The endpoint expects the count as a string
        body = await self.gateway.put(f"{CART_PATH}/{product_id}", {"count": str(quantity)})
        return parse_cart_response(body)

    async def remove(self, product_id: str) -> Snapshot[CartItem]:
        return parse_cart_response(await self.gateway.delete(f"{CART_PATH}/{product_id}"))

    async def clear(self) -> Snapshot[CartItem]:
        # DELETE /cart answers {"message": "success"} without a cart body
        await self.gateway.delete(CART_PATH)
        return Snapshot(items=[])
