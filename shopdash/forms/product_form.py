# shopdash/forms/product_form.py

"""Create and edit product form controllers.

A form holds the raw text fields, the image selection set and the
current field errors. ``submit()`` validates everything locally first;
only a valid form reaches :class:`ProductService`. On a remote failure
the exception propagates and the form keeps its state so the user can
retry by hand.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

from shopdash.api.errors import FormValidationError, NotFoundError
from shopdash.config.settings import Settings
from shopdash.forms.form_validator import (
    CREATE,
    EDIT,
    ProductFormValidator,
    coerce_price,
)
from shopdash.forms.image_selection import ImageSelection, NewImage
from shopdash.forms.previews import PreviewRegistry
from shopdash.models.local_file import LocalImageFile
from shopdash.models.product import Product, ProductDraft, ProductUpdate
from shopdash.services.product_service import ProductService

logger = logging.getLogger("shopdash.forms")


class ProductForm(ABC):
    """Shared state and behaviour of the create and edit forms."""

    mode: str = CREATE

    def __init__(
        self,
        service: ProductService,
        previews: PreviewRegistry | None = None,
    ) -> None:
        self.service = service
        self.name: str = ""
        self.price: str = ""
        self.description: str = ""
        self.images = ImageSelection(previews)
        self.errors: dict[str, str] = {}
        self.closed = False

    def __enter__(self) -> "ProductForm":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ── Field edits ──────────────────────────────────────

    def set_name(self, value: str) -> None:
        self.name = value
        self.errors.pop("name", None)

    def set_price(self, value: str) -> None:
        self.price = value
        self.errors.pop("price", None)

    def set_description(self, value: str) -> None:
        self.description = value

    def add_images(
        self, paths: Iterable[str | Path | LocalImageFile],
    ) -> list[NewImage]:
        added = self._add_images(paths)
        self.errors.pop("images", None)
        return added

    def remove_image(self, entry_id: str) -> bool:
        removed = self.images.remove(entry_id)
        self.errors.pop("images", None)
        return removed

    @abstractmethod
    def _add_images(
        self, paths: Iterable[str | Path | LocalImageFile],
    ) -> list[NewImage]:
        """Append picked files under the variant's add-time rules."""
        ...

    # ── Submission ───────────────────────────────────────

    def validate(self) -> bool:
        self.errors = ProductFormValidator.validate(
            self.name, self.price, len(self.images), self.mode,
        )
        return not self.errors

    def submit(self) -> Product | None:
        """Validate, then save through the product service.

        Raises :class:`FormValidationError` without any network call when
        a field is invalid.
        """
        price = coerce_price(self.price)
        if not self.validate() or price is None:
            raise FormValidationError(self.errors)
        product = self._save(
            self.name.strip(), price, self.description.strip(),
        )
        logger.info("Product form (%s) submitted", self.mode)
        return product

    @abstractmethod
    def _save(
        self, name: str, price: float, description: str,
    ) -> Product | None:
        """Send the validated fields to the product service."""
        ...

    def close(self) -> None:
        """Release every preview the form still holds."""
        if not self.closed:
            self.images.close()
            self.closed = True


class CreateProductForm(ProductForm):
    """New product form; starts empty and dedupes picked files."""

    mode = CREATE

    def _add_images(
        self, paths: Iterable[str | Path | LocalImageFile],
    ) -> list[NewImage]:
        return self.images.add_files(paths, dedupe=True)

    def _save(
        self, name: str, price: float, description: str,
    ) -> Product | None:
        return self.service.create_product(
            ProductDraft(
                name=name,
                price=price,
                description=description,
                images=self.images.new_files(),
            )
        )


class EditProductForm(ProductForm):
    """Edit form hydrated from an existing product."""

    mode = EDIT

    def __init__(
        self,
        service: ProductService,
        product_id: str,
        previews: PreviewRegistry | None = None,
    ) -> None:
        super().__init__(service, previews)
        self.product_id = product_id
        self.product: Product | None = None

    def load(self) -> Product:
        """Fetch the product and copy it into the form fields."""
        product = self.service.get_product(self.product_id)
        if product is None:
            raise NotFoundError(f"Product {self.product_id} not available")
        self.hydrate(product)
        return product

    def hydrate(self, product: Product) -> None:
        self.product = product
        self.name = product.name
        self.price = _price_text(product.price)
        self.description = product.description
        self.images.clear()
        self.images.add_existing(product.images)
        self.errors = {}

    def _add_images(
        self, paths: Iterable[str | Path | LocalImageFile],
    ) -> list[NewImage]:
        slots = Settings.MAX_IMAGES - len(self.images)
        if slots <= 0:
            logger.info("Image limit reached; ignoring new files")
            return []
        return self.images.add_files(paths, limit=slots)

    def _save(
        self, name: str, price: float, description: str,
    ) -> Product | None:
        return self.service.update_product(
            ProductUpdate(
                id=self.product_id,
                name=name,
                price=price,
                description=description,
                kept_existing_urls=self.images.kept_urls(),
                new_images=self.images.new_files(),
            )
        )


def _price_text(price: float) -> str:
    return str(int(price)) if float(price).is_integer() else str(price)
