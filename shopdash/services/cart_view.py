# shopdash/services/cart_view.py

"""Cart page logic: defensive totals and quantity stepper intents."""

import logging
from dataclasses import dataclass

from shopdash.models.cart import Cart, CartItem, ResolvedProduct
from shopdash.services.cart_service import CartService

logger = logging.getLogger("shopdash.cart")

UNAVAILABLE_LABEL = "Product unavailable"
UNAVAILABLE_HINT = "This product no longer exists. Remove it from your cart."


@dataclass
class CartRow:
    """One rendered cart line."""

    item: CartItem
    label: str
    unit_price: float
    quantity: int
    line_total: float
    available: bool
    image_url: str | None = None


class CartViewController:
    """Derive what the cart page shows and map clicks to cart writes."""

    def __init__(self, service: CartService) -> None:
        self.service = service

    @staticmethod
    def total(cart: Cart | None) -> float:
        """Sum of quantity x price, skipping lines whose product is gone."""
        if cart is None:
            return 0.0
        return cart.total

    @staticmethod
    def rows(cart: Cart | None) -> list[CartRow]:
        if cart is None:
            return []
        rows: list[CartRow] = []
        for item in cart.items:
            if isinstance(item.product, ResolvedProduct):
                product = item.product.product
                rows.append(
                    CartRow(
                        item=item,
                        label=product.name,
                        unit_price=product.price,
                        quantity=item.quantity,
                        line_total=item.line_total,
                        available=True,
                        image_url=product.main_image,
                    )
                )
            else:
                rows.append(
                    CartRow(
                        item=item,
                        label=UNAVAILABLE_LABEL,
                        unit_price=0.0,
                        quantity=item.quantity,
                        line_total=0.0,
                        available=False,
                    )
                )
        return rows

    def change_quantity(self, item: CartItem, new_quantity: int) -> Cart:
        """Update to *new_quantity*, or remove the line when it is <= 0."""
        if new_quantity <= 0:
            logger.debug(
                "Quantity for line %s reached %d; removing",
                item.id,
                new_quantity,
            )
            return self.service.remove_line(item)
        if not isinstance(item.product, ResolvedProduct):
            raise ValueError(
                f"Cart line {item.id} has no product; it can only be removed"
            )
        return self.service.update_item(
            item.product.product.id, new_quantity
        )

    def increment(self, item: CartItem) -> Cart:
        return self.change_quantity(item, item.quantity + 1)

    def decrement(self, item: CartItem) -> Cart:
        return self.change_quantity(item, item.quantity - 1)

    def remove(self, item: CartItem) -> Cart:
        return self.service.remove_line(item)
