# shopdash/models/cart.py

"""Cart data model.

The remote API populates each line item's ``productId`` with the full
product document. When that product has been deleted the field comes back
as ``null`` (or, on older carts, as the bare id string), so a line item's
product reference is modelled as either :class:`ResolvedProduct` or
:class:`UnresolvedProduct` and every consumer has to handle both.
"""

from dataclasses import dataclass, field
from typing import Any

from shopdash.models.product import Product


@dataclass(frozen=True)
class ResolvedProduct:
    """A line item whose product still exists."""

    product: Product


@dataclass(frozen=True)
class UnresolvedProduct:
    """A line item whose product could not be resolved.

    ``raw`` keeps the unpopulated id string when the API sent one.
    """

    raw: str | None = None


ProductRef = ResolvedProduct | UnresolvedProduct


def parse_product_ref(value: Any) -> ProductRef:
    """Map the wire value of ``productId`` onto a :data:`ProductRef`."""
    if isinstance(value, dict) and value.get("_id"):
        return ResolvedProduct(Product.from_api(value))
    if isinstance(value, str) and value:
        return UnresolvedProduct(raw=value)
    return UnresolvedProduct()


@dataclass
class CartItem:
    """A single cart line."""

    id: str
    product: ProductRef
    quantity: int

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "CartItem":
        return cls(
            id=str(payload.get("_id", "")),
            product=parse_product_ref(payload.get("productId")),
            quantity=int(payload.get("quantity") or 0),
        )

    @property
    def product_id(self) -> str | None:
        """Best available product id: the populated one, else the raw one."""
        if isinstance(self.product, ResolvedProduct):
            return self.product.product.id
        return self.product.raw

    @property
    def line_total(self) -> float:
        """Quantity times price; unresolved items contribute nothing."""
        if isinstance(self.product, ResolvedProduct):
            return self.product.product.price * self.quantity
        return 0.0


@dataclass
class Cart:
    """The signed-in user's cart."""

    user_id: str
    items: list[CartItem] = field(default_factory=lambda: list[CartItem]())
    id: str | None = None

    @classmethod
    def empty(cls, user_id: str) -> "Cart":
        return cls(user_id=user_id)

    @classmethod
    def from_api(cls, payload: dict[str, Any] | None, user_id: str) -> "Cart":
        """Build a Cart, tolerating a missing cart or item list."""
        if not payload:
            return cls.empty(user_id)
        items = payload.get("items") or []
        return cls(
            user_id=str(payload.get("userId") or user_id),
            items=[
                CartItem.from_api(item)
                for item in items
                if isinstance(item, dict)
            ],
            id=payload.get("_id"),
        )

    @property
    def total(self) -> float:
        return sum((item.line_total for item in self.items), 0.0)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
