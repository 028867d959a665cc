"""
Pydantic wire schemas

Remote API payloads (cart, wishlist) and the persisted guest record.
Field names follow the wire format; domain code converts them into the
dataclasses in cartsync.cart.models.
"""

from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ==================== PRODUCT ====================

class ProductPayload(WireModel):
    """Product snapshot as the API returns it (full product or cart subset)."""
    id: str = Field(alias="_id")
    title: str = ""
    imageCover: str = ""
    quantity: int = 0  # available stock, not cart quantity
    ratingsAverage: float = 0.0
    price: Optional[Decimal] = None
    priceAfterDiscount: Optional[Decimal] = None


# ==================== CART ====================

class CartProductEntry(WireModel):
    """One cart line. POST /cart answers with `product` as a bare id."""
    id: str = Field(alias="_id")
    count: int
    price: Decimal
    product: Union[ProductPayload, str]


class CartData(WireModel):
    id: str = Field(alias="_id")
    cartOwner: Optional[str] = None
    products: List[CartProductEntry] = []
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    totalCartPrice: Optional[Decimal] = None


class CartApiResponse(WireModel):
    """GET/POST/PUT/DELETE /cart/... responses carrying the full cart."""
    status: str = "success"
    message: Optional[str] = None
    numOfCartItems: int = 0
    cartId: Optional[str] = None
    data: Optional[CartData] = None


# ==================== WISHLIST ====================

class WishlistApiResponse(WireModel):
    """
    GET /wishlist returns full products; POST and DELETE return product ids only.
    """
    status: str = "success"
    message: Optional[str] = None
    count: int = 0
    data: List[Union[ProductPayload, str]] = []


# ==================== PERSISTED GUEST RECORD ====================

class PersistedRecord(WireModel):
    """Layout of a guest collection in the Persistent Store."""
    items: List[dict]
    savedAtTimestamp: float  # epoch milliseconds
    ownerId: Optional[str] = None
