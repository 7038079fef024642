# tests/test_cart_model.py

"""Tests for the cart model and its product reference variants."""

import unittest

from shopdash.models.cart import (
    Cart,
    CartItem,
    ResolvedProduct,
    UnresolvedProduct,
    parse_product_ref,
)
from tests.helpers import make_product, product_payload


class TestParseProductRef(unittest.TestCase):
    """productId may be a populated document, a bare id, or null."""

    def test_populated_document_resolves(self) -> None:
        ref = parse_product_ref(product_payload("p9"))
        self.assertIsInstance(ref, ResolvedProduct)
        assert isinstance(ref, ResolvedProduct)
        self.assertEqual(ref.product.id, "p9")

    def test_bare_id_is_unresolved_with_raw(self) -> None:
        ref = parse_product_ref("p9")
        self.assertEqual(ref, UnresolvedProduct(raw="p9"))

    def test_null_is_unresolved(self) -> None:
        self.assertEqual(parse_product_ref(None), UnresolvedProduct())

    def test_document_without_id_is_unresolved(self) -> None:
        self.assertEqual(
            parse_product_ref({"name": "ghost"}), UnresolvedProduct()
        )

    def test_empty_string_is_unresolved(self) -> None:
        self.assertEqual(parse_product_ref(""), UnresolvedProduct())


class TestCartItem(unittest.TestCase):
    """Line totals and ids for both reference variants."""

    def test_line_total_resolved(self) -> None:
        item = CartItem(
            id="i1",
            product=ResolvedProduct(make_product(price=12.5)),
            quantity=2,
        )
        self.assertEqual(item.line_total, 25.0)
        self.assertEqual(item.product_id, "p1")

    def test_line_total_unresolved_is_zero(self) -> None:
        item = CartItem(id="i1", product=UnresolvedProduct(), quantity=4)
        self.assertEqual(item.line_total, 0.0)
        self.assertIsNone(item.product_id)

    def test_product_id_falls_back_to_raw(self) -> None:
        item = CartItem(
            id="i1", product=UnresolvedProduct(raw="gone"), quantity=1
        )
        self.assertEqual(item.product_id, "gone")

    def test_from_api(self) -> None:
        item = CartItem.from_api(
            {"_id": "i1", "productId": product_payload(), "quantity": 3}
        )
        self.assertEqual(item.id, "i1")
        self.assertEqual(item.quantity, 3)
        self.assertIsInstance(item.product, ResolvedProduct)


class TestCart(unittest.TestCase):
    """Cart parsing and aggregates."""

    def test_none_payload_is_empty_cart(self) -> None:
        cart = Cart.from_api(None, "user-1")
        self.assertEqual(cart.user_id, "user-1")
        self.assertEqual(cart.items, [])
        self.assertEqual(cart.total, 0.0)

    def test_missing_items_is_empty(self) -> None:
        cart = Cart.from_api({"_id": "c1", "userId": "user-1"}, "user-1")
        self.assertEqual(cart.items, [])
        self.assertEqual(cart.id, "c1")

    def test_total_skips_deleted_products(self) -> None:
        """A line whose product was deleted contributes nothing."""
        cart = Cart.from_api(
            {
                "userId": "user-1",
                "items": [
                    {
                        "_id": "i1",
                        "productId": product_payload("a", price=10.0),
                        "quantity": 2,
                    },
                    {"_id": "i2", "productId": None, "quantity": 5},
                ],
            },
            "user-1",
        )
        self.assertEqual(len(cart.items), 2)
        self.assertEqual(cart.total, 20.0)
        self.assertEqual(cart.item_count, 7)

    def test_total_with_only_deleted_products(self) -> None:
        cart = Cart.from_api(
            {"items": [{"_id": "i1", "productId": None, "quantity": 2}]},
            "user-1",
        )
        self.assertEqual(cart.total, 0.0)

    def test_non_dict_items_ignored(self) -> None:
        cart = Cart.from_api({"items": ["junk", None]}, "user-1")
        self.assertEqual(cart.items, [])


if __name__ == "__main__":
    unittest.main()
