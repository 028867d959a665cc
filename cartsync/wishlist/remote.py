"""
Wishlist remote adapter

POST /wishlist and DELETE /wishlist/{id} answer with product ids only, so
every mutation is followed by GET /wishlist to rehydrate full products
before a snapshot is handed back.
"""

from typing import List

from pydantic import ValidationError

from cartsync.collection.models import ProductSnapshot, Snapshot
from cartsync.errors import ERROR_INVALID_RESPONSE, GatewayError
from cartsync.gateway import RemoteGateway
from cartsync.logging import get_logger, sanitize_id_for_logging
from cartsync.schemas import ProductPayload, WishlistApiResponse

logger = get_logger(__name__)

WISHLIST_PATH = "/wishlist"


def parse_wishlist_response(body) -> List[ProductSnapshot]:
    if not body:
        return []
    try:
        response = WishlistApiResponse.model_validate(body)
    except ValidationError as e:
        logger.warning("Invalid wishlist response: %s", e.error_count())
        raise GatewayError(ERROR_INVALID_RESPONSE) from e
    return [
        ProductSnapshot.from_payload(entry)
        for entry in response.data
        if isinstance(entry, ProductPayload)
    ]


class WishlistRemoteAdapter:
    """Wishlist endpoints of the remote API."""

    def __init__(self, gateway: RemoteGateway):
        self.gateway = gateway

    async def fetch_all(self) -> Snapshot[ProductSnapshot]:
        return Snapshot(items=parse_wishlist_response(await self.gateway.get(WISHLIST_PATH)))

    async def add(self, product_id: str) -> Snapshot[ProductSnapshot]:
        await self.gateway.post(WISHLIST_PATH, {"productId": product_id})
        logger.debug("Added %s to remote wishlist", sanitize_id_for_logging(product_id))
        return await self.fetch_all()

    async def remove(self, product_id: str) -> Snapshot[ProductSnapshot]:
        await self.gateway.delete(f"{WISHLIST_PATH}/{product_id}")
        return await self.fetch_all()

    async def clear(self) -> Snapshot[ProductSnapshot]:
        """No bulk endpoint exists: delete every current entry, then re-read."""
        current = await self.fetch_all()
        for product in current.items:
            await self.gateway.delete(f"{WISHLIST_PATH}/{product.id}")
        return await self.fetch_all()
