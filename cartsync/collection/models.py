"""Shared collection models: product snapshot, collection state, snapshots."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Generic, List, Optional, Set, TypeVar

from cartsync.money import to_decimal
from cartsync.schemas import ProductPayload

T = TypeVar("T")


@dataclass
class ProductSnapshot:
    """Product data captured when it entered a collection."""
    id: str
    title: str = ""
    image_cover: str = ""
    stock_quantity: int = 0  # available stock, not the quantity in a cart
    ratings_average: float = 0.0
    price: Optional[Decimal] = None
    price_after_discount: Optional[Decimal] = None

    def __post_init__(self):
        if self.price is not None:
            self.price = to_decimal(self.price)
        if self.price_after_discount is not None:
            self.price_after_discount = to_decimal(self.price_after_discount)

    @property
    def product_id(self) -> str:
        return self.id

    @property
    def current_price(self) -> Decimal:
        """Discounted price when the product has one, else list price."""
        return self.price_after_discount or self.price or Decimal("0")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "image_cover": self.image_cover,
            "stock_quantity": self.stock_quantity,
            "ratings_average": self.ratings_average,
            "price": None if self.price is None else str(self.price),
            "price_after_discount": (
                None if self.price_after_discount is None else str(self.price_after_discount)
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProductSnapshot":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            image_cover=data.get("image_cover", ""),
            stock_quantity=int(data.get("stock_quantity", 0)),
            ratings_average=float(data.get("ratings_average", 0.0)),
            price=data.get("price"),
            price_after_discount=data.get("price_after_discount"),
        )

    @classmethod
    def from_payload(cls, payload: ProductPayload) -> "ProductSnapshot":
        return cls(
            id=payload.id,
            title=payload.title,
            image_cover=payload.imageCover,
            stock_quantity=payload.quantity,
            ratings_average=payload.ratingsAverage,
            price=payload.price,
            price_after_discount=payload.priceAfterDiscount,
        )

    @classmethod
    def from_api(cls, data: dict) -> "ProductSnapshot":
        """Build from an API product object ({"_id": ..., "imageCover": ...})."""
        return cls.from_payload(ProductPayload.model_validate(data))


@dataclass
class Snapshot(Generic[T]):
    """Authoritative item list, plus the remote collection id when there is one."""
    items: List[T]
    remote_id: Optional[str] = None


@dataclass
class CollectionState(Generic[T]):
    """Canonical in-memory state of one collection (cart or wishlist)."""
    items: List[T] = field(default_factory=list)
    remote_id: Optional[str] = None
    is_authenticated: bool = False
    pending_ids: Set[str] = field(default_factory=set)
    is_loading: bool = False
    is_syncing: bool = False
    error: Optional[str] = None
    last_updated: float = 0.0


@dataclass
class CollectionSummary:
    """Display summary of a collection."""
    total_items: int
    total_price: Decimal
    is_empty: bool
    items_count: str


def items_count_label(count: int) -> str:
    return "1 item" if count == 1 else f"{count} items"
