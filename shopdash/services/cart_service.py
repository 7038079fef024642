# shopdash/services/cart_service.py

"""Cart reads and writes against the remote API."""

import logging
from collections.abc import Callable
from typing import Any

from shopdash.api.client import ApiClient
from shopdash.api.errors import (
    DashboardError,
    NotAuthenticatedError,
    RemoteApiError,
)
from shopdash.auth.session import SessionStore
from shopdash.models.cart import Cart, CartItem
from shopdash.storage.query_cache import QueryCache

logger = logging.getLogger("shopdash.cart")

CART_KEY = ("cart",)

Notifier = Callable[..., Any]


class CartService:
    """Fetch and mutate the signed-in user's cart.

    Every successful write invalidates the cached cart so the next
    :meth:`get_cart` refetches it with products populated server-side.
    """

    def __init__(
        self,
        api: ApiClient,
        cache: QueryCache,
        session: SessionStore,
        notify: Notifier | None = None,
    ) -> None:
        self.api = api
        self.cache = cache
        self.session = session
        self.notify = notify

    def get_cart(self) -> Cart | None:
        """Return the current cart, or ``None`` when signed out."""
        user_id = self.session.user_id
        if user_id is None:
            logger.debug("get_cart withheld: no session")
            return None

        def load() -> Cart:
            payload = self.api.get("/cart", self.session.auth_headers())
            if payload is not None and not isinstance(payload, dict):
                raise RemoteApiError(
                    "Expected a cart object from /cart, "
                    f"got {type(payload).__name__}"
                )
            try:
                cart = Cart.from_api(payload, user_id)
            except (TypeError, ValueError) as exc:
                raise RemoteApiError(f"Malformed cart from /cart: {exc}") from exc
            logger.info(
                "Loaded cart for %s with %d items",
                user_id,
                len(cart.items),
            )
            return cart

        cart: Cart = self.cache.fetch(CART_KEY, load)
        return cart

    def add_item(self, product_id: str, quantity: int = 1) -> Cart:
        """Add *quantity* of a product, incrementing an existing line."""
        try:
            headers = self._require_identity()
            payload = self.api.post_json(
                "/cart/add",
                {"productId": product_id, "quantity": quantity},
                headers,
            )
        except DashboardError:
            logger.error(
                "Failed to add %s to cart", product_id, exc_info=True,
            )
            self._notify("Failed to add product.", severity="error")
            raise
        logger.info("Added %s x%d to cart", product_id, quantity)
        self.cache.invalidate(CART_KEY)
        self._notify("Product added to cart!")
        return self._cart_from(payload)

    def update_item(self, product_id: str, quantity: int) -> Cart:
        """Set the absolute quantity of a cart line.

        Non-positive quantities are a removal intent and must go through
        :meth:`remove_item` instead.
        """
        if quantity <= 0:
            raise ValueError(
                f"Quantity must be positive, got {quantity}; "
                "use remove_item instead"
            )
        headers = self._require_identity()
        payload = self.api.post_json(
            "/cart/update",
            {"productId": product_id, "quantity": quantity},
            headers,
        )
        logger.info("Set %s quantity to %d", product_id, quantity)
        self.cache.invalidate(CART_KEY)
        return self._cart_from(payload)

    def remove_item(
        self,
        product_id: str | None = None,
        item_id: str | None = None,
    ) -> Cart:
        """Delete a cart line by product id and/or cart-line id."""
        if not product_id and not item_id:
            raise ValueError("remove_item needs a product id or item id")
        headers = self._require_identity()
        body: dict[str, str] = {}
        if product_id:
            body["productId"] = product_id
        if item_id:
            body["itemId"] = item_id
        payload = self.api.post_json("/cart/remove", body, headers)
        logger.info("Removed cart line %s", body)
        self.cache.invalidate(CART_KEY)
        return self._cart_from(payload)

    def remove_line(self, item: CartItem) -> Cart:
        """Remove *item*, whether or not its product still exists."""
        return self.remove_item(
            product_id=item.product_id, item_id=item.id or None,
        )

    def _require_identity(self) -> dict[str, str]:
        if not self.session.is_authenticated:
            raise NotAuthenticatedError()
        return self.session.auth_headers()

    def _cart_from(self, payload: Any) -> Cart:
        try:
            return Cart.from_api(
                payload if isinstance(payload, dict) else None,
                self.session.user_id or "",
            )
        except (TypeError, ValueError) as exc:
            raise RemoteApiError(f"Malformed cart in response: {exc}") from exc

    def _notify(self, message: str, severity: str = "information") -> None:
        if self.notify is not None:
            self.notify(message, severity=severity)
