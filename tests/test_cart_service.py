# tests/test_cart_service.py

"""Tests for cart reads, writes and user notifications."""

import unittest
from unittest.mock import MagicMock

from shopdash.api.errors import NotAuthenticatedError, RemoteApiError
from shopdash.auth.session import Identity, SessionStore
from shopdash.models.cart import CartItem, UnresolvedProduct
from shopdash.services.cart_service import CART_KEY, CartService
from shopdash.storage.query_cache import QueryCache
from tests.helpers import product_payload


class TestCartService(unittest.TestCase):
    """CartService against a mocked ApiClient."""

    def setUp(self) -> None:
        self.api = MagicMock()
        self.cache = QueryCache(ttl=60)
        self.session = SessionStore(Identity("user-1"))
        self.notify = MagicMock()
        self.service = CartService(
            self.api, self.cache, self.session, notify=self.notify
        )

    def test_get_cart_none_payload_is_empty(self) -> None:
        self.api.get.return_value = None
        cart = self.service.get_cart()
        assert cart is not None
        self.assertEqual(cart.items, [])
        self.assertEqual(cart.user_id, "user-1")

    def test_get_cart_withheld_when_signed_out(self) -> None:
        self.session.sign_out()
        self.assertIsNone(self.service.get_cart())
        self.api.get.assert_not_called()

    def test_get_cart_cached(self) -> None:
        self.api.get.return_value = {"items": []}
        self.service.get_cart()
        self.service.get_cart()
        self.api.get.assert_called_once_with("/cart", {"x-user-id": "user-1"})

    def test_get_cart_rejects_non_object_body(self) -> None:
        self.api.get.return_value = ["oops"]
        with self.assertRaises(RemoteApiError):
            self.service.get_cart()
        self.assertIsNone(self.cache.get(CART_KEY))

    # ── add_item ─────────────────────────────────────────

    def test_add_item_success(self) -> None:
        self.cache.set(CART_KEY, "stale")
        self.api.post_json.return_value = {
            "items": [
                {"_id": "i1", "productId": product_payload(), "quantity": 1}
            ]
        }
        cart = self.service.add_item("p1")
        self.assertEqual(len(cart.items), 1)
        self.api.post_json.assert_called_once_with(
            "/cart/add",
            {"productId": "p1", "quantity": 1},
            {"x-user-id": "user-1"},
        )
        self.assertIsNone(self.cache.get(CART_KEY))
        self.notify.assert_called_once_with(
            "Product added to cart!", severity="information"
        )

    def test_add_item_failure_notifies_and_keeps_cache(self) -> None:
        self.cache.set(CART_KEY, "cached")
        self.api.post_json.side_effect = RemoteApiError("HTTP 500", 500)
        with self.assertRaises(RemoteApiError):
            self.service.add_item("p1")
        self.assertEqual(self.cache.get(CART_KEY), "cached")
        self.notify.assert_called_once_with(
            "Failed to add product.", severity="error"
        )

    def test_add_item_signed_out(self) -> None:
        self.session.sign_out()
        with self.assertRaises(NotAuthenticatedError):
            self.service.add_item("p1")
        self.api.post_json.assert_not_called()
        self.notify.assert_called_once_with(
            "Failed to add product.", severity="error"
        )

    def test_add_item_without_notifier(self) -> None:
        service = CartService(self.api, self.cache, self.session)
        self.api.post_json.return_value = None
        cart = service.add_item("p1", quantity=2)
        self.assertEqual(cart.items, [])

    # ── update_item ──────────────────────────────────────

    def test_update_item_sets_quantity(self) -> None:
        self.api.post_json.return_value = {}
        self.service.update_item("p1", 4)
        self.api.post_json.assert_called_once_with(
            "/cart/update",
            {"productId": "p1", "quantity": 4},
            {"x-user-id": "user-1"},
        )

    def test_update_item_rejects_non_positive(self) -> None:
        for quantity in (0, -1):
            with self.subTest(quantity=quantity):
                with self.assertRaises(ValueError):
                    self.service.update_item("p1", quantity)
        self.api.post_json.assert_not_called()

    # ── remove_item ──────────────────────────────────────

    def test_remove_item_by_product(self) -> None:
        self.cache.set(CART_KEY, "stale")
        self.api.post_json.return_value = {}
        self.service.remove_item(product_id="p1")
        self.api.post_json.assert_called_once_with(
            "/cart/remove", {"productId": "p1"}, {"x-user-id": "user-1"}
        )
        self.assertIsNone(self.cache.get(CART_KEY))

    def test_remove_item_requires_an_id(self) -> None:
        with self.assertRaises(ValueError):
            self.service.remove_item()

    def test_remove_line_for_deleted_product_uses_item_id(self) -> None:
        """A line whose product is gone is removed by its own id."""
        self.api.post_json.return_value = {}
        item = CartItem(id="i7", product=UnresolvedProduct(), quantity=2)
        self.service.remove_line(item)
        self.api.post_json.assert_called_once_with(
            "/cart/remove", {"itemId": "i7"}, {"x-user-id": "user-1"}
        )

    def test_remove_line_sends_raw_product_id(self) -> None:
        self.api.post_json.return_value = {}
        item = CartItem(
            id="i7", product=UnresolvedProduct(raw="p-old"), quantity=1
        )
        self.service.remove_line(item)
        body = self.api.post_json.call_args[0][1]
        self.assertEqual(body, {"productId": "p-old", "itemId": "i7"})


if __name__ == "__main__":
    unittest.main()
