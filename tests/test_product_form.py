# tests/test_product_form.py

"""Tests for the create and edit product form controllers."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from shopdash.api.errors import (
    FormValidationError,
    NotFoundError,
    RemoteApiError,
)
from shopdash.forms.product_form import (
    CreateProductForm,
    EditProductForm,
    ProductForm,
)
from shopdash.models.product import Product, ProductDraft, ProductUpdate
from tests.helpers import make_product, write_png


class _FormTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)
        self.service = MagicMock()

    def pngs(self, count: int, prefix: str = "img") -> list[Path]:
        return [write_png(self.tmp, f"{prefix}{i}.png") for i in range(count)]


class TestProductFormBase(_FormTestCase):
    """The shared base only works through a concrete variant."""

    def test_base_cannot_be_instantiated(self) -> None:
        with self.assertRaises(TypeError):
            ProductForm(self.service)  # type: ignore[abstract]


class TestCreateProductForm(_FormTestCase):
    """Create form behaviour."""

    def test_empty_submit_reports_all_errors(self) -> None:
        with CreateProductForm(self.service) as form:
            with self.assertRaises(FormValidationError) as ctx:
                form.submit()
        self.assertEqual(
            set(ctx.exception.errors), {"name", "price", "images"}
        )
        self.service.create_product.assert_not_called()

    def test_two_images_blocks_submit(self) -> None:
        with CreateProductForm(self.service) as form:
            form.set_name("Lamp")
            form.set_price("10")
            form.add_images(self.pngs(2))
            with self.assertRaises(FormValidationError):
                form.submit()
            self.assertEqual(
                form.errors, {"images": "Please select at least 3 images"}
            )
        self.service.create_product.assert_not_called()

    def test_valid_submit_creates_draft(self) -> None:
        self.service.create_product.return_value = make_product("new")
        with CreateProductForm(self.service) as form:
            form.set_name("  Lamp ")
            form.set_price("12.5")
            form.set_description(" Warm ")
            form.add_images(self.pngs(3))
            product = form.submit()
        assert product is not None
        self.assertEqual(product.id, "new")
        (draft,) = self.service.create_product.call_args[0]
        self.assertIsInstance(draft, ProductDraft)
        self.assertEqual(draft.name, "Lamp")
        self.assertEqual(draft.price, 12.5)
        self.assertEqual(draft.description, "Warm")
        self.assertEqual(len(draft.images), 3)

    def test_four_images_blocks_submit(self) -> None:
        with CreateProductForm(self.service) as form:
            form.set_name("Lamp")
            form.set_price("10")
            form.add_images(self.pngs(4))
            self.assertEqual(len(form.images), 4)
            with self.assertRaises(FormValidationError) as ctx:
                form.submit()
        self.assertEqual(
            ctx.exception.errors, {"images": "Maximum 3 images allowed"}
        )
        self.service.create_product.assert_not_called()

    def test_duplicate_files_not_added(self) -> None:
        paths = self.pngs(1)
        with CreateProductForm(self.service) as form:
            form.add_images(paths)
            form.add_images(paths)
            self.assertEqual(len(form.images), 1)

    def test_editing_field_clears_its_error(self) -> None:
        with CreateProductForm(self.service) as form:
            form.validate()
            form.set_name("Lamp")
            self.assertNotIn("name", form.errors)
            self.assertIn("price", form.errors)

    def test_remote_failure_keeps_form_state(self) -> None:
        self.service.create_product.side_effect = RemoteApiError("down")
        with CreateProductForm(self.service) as form:
            form.set_name("Lamp")
            form.set_price("10")
            form.add_images(self.pngs(3))
            with self.assertRaises(RemoteApiError):
                form.submit()
            self.assertEqual(form.name, "Lamp")
            self.assertEqual(len(form.images), 3)
            self.assertEqual(len(form.images.previews), 3)

    def test_close_releases_previews(self) -> None:
        form = CreateProductForm(self.service)
        form.add_images(self.pngs(2))
        form.close()
        form.close()
        self.assertTrue(form.closed)
        self.assertEqual(len(form.images.previews), 0)


class TestEditProductForm(_FormTestCase):
    """Edit form hydration and image bookkeeping."""

    def _product(self) -> Product:
        product = make_product(
            "p1",
            name="Lamp",
            price=30.0,
            images=["urlA", "urlB", "urlC"],
            description="Old",
        )
        self.service.get_product.return_value = product
        return product

    def test_load_hydrates_fields(self) -> None:
        self._product()
        with EditProductForm(self.service, "p1") as form:
            form.load()
            self.assertEqual(form.name, "Lamp")
            self.assertEqual(form.price, "30")
            self.assertEqual(form.description, "Old")
            self.assertEqual(form.images.kept_urls(), ["urlA", "urlB", "urlC"])

    def test_fractional_price_text(self) -> None:
        self.service.get_product.return_value = make_product(price=19.99)
        with EditProductForm(self.service, "p1") as form:
            form.load()
            self.assertEqual(form.price, "19.99")

    def test_load_missing_product(self) -> None:
        self.service.get_product.return_value = None
        with EditProductForm(self.service, "p1") as form:
            with self.assertRaises(NotFoundError):
                form.load()

    def test_add_blocked_at_limit(self) -> None:
        self._product()
        with EditProductForm(self.service, "p1") as form:
            form.load()
            self.assertEqual(form.add_images(self.pngs(1)), [])
            self.assertEqual(len(form.images), 3)

    def test_replace_one_image(self) -> None:
        """Remove B, add one new file: keeps A and C and uploads one."""
        self._product()
        with EditProductForm(self.service, "p1") as form:
            form.load()
            form.remove_image("urlB")
            form.add_images(self.pngs(2, prefix="new"))
            self.assertEqual(len(form.images), 3)
            form.submit()
        (update,) = self.service.update_product.call_args[0]
        self.assertIsInstance(update, ProductUpdate)
        self.assertEqual(update.id, "p1")
        self.assertEqual(update.kept_existing_urls, ["urlA", "urlC"])
        self.assertEqual([f.name for f in update.new_images], ["new0.png"])

    def test_too_few_images_blocks_update(self) -> None:
        self._product()
        with EditProductForm(self.service, "p1") as form:
            form.load()
            form.remove_image("urlA")
            with self.assertRaises(FormValidationError):
                form.submit()
            self.assertEqual(
                form.errors["images"], "At least 3 images are required"
            )
        self.service.update_product.assert_not_called()


if __name__ == "__main__":
    unittest.main()
