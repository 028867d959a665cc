"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from cartsync.collection.models import ProductSnapshot
from cartsync.money import line_total, to_decimal, to_float


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class CartItem:
    """
    Single product line in the cart.

    `total_price` is derived from quantity and unit price on every read; it is
    never stored on the item.
    """
    item_id: str
    product: ProductSnapshot
    quantity: int
    unit_price: Decimal  # price captured when the product was added
    added_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        now = _now_iso()
        if not self.added_at:
            self.added_at = now
        if not self.updated_at:
            self.updated_at = self.added_at
        self.unit_price = to_decimal(self.unit_price)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def total_price(self) -> Decimal:
        """Total price for all units."""
        return line_total(self.unit_price, self.quantity)

    def with_quantity(self, quantity: int) -> "CartItem":
        """Copy with a new quantity and a fresh updated_at."""
        return replace(self, quantity=quantity, updated_at=_now_iso())

    @classmethod
    def from_product(
        cls,
        product: ProductSnapshot,
        quantity: int = 1,
        now_ms: Optional[int] = None,
    ) -> "CartItem":
        """Create a guest cart line; the id is local until the server assigns one."""
        stamp = now_ms if now_ms is not None else int(datetime.now(timezone.utc).timestamp() * 1000)
        return cls(
            item_id=f"local_{product.id}_{stamp}",
            product=product,
            quantity=quantity,
            unit_price=product.current_price,
        )

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "product": self.product.to_dict(),
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "total_price": to_float(self.total_price),
            "added_at": self.added_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        # total_price in stored data is ignored and recomputed
        return cls(
            item_id=data["item_id"],
            product=ProductSnapshot.from_dict(data["product"]),
            quantity=int(data["quantity"]),
            unit_price=to_decimal(data["unit_price"]),
            added_at=data.get("added_at", ""),
            updated_at=data.get("updated_at", ""),
        )
