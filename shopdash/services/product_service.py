# shopdash/services/product_service.py

"""Product reads and writes against the remote API."""

import json
import logging
from decimal import Decimal
from typing import Any

from shopdash.api.client import ApiClient
from shopdash.api.errors import (
    NotAuthenticatedError,
    NotFoundError,
    RemoteApiError,
)
from shopdash.auth.session import SessionStore
from shopdash.models.product import Product, ProductDraft, ProductUpdate
from shopdash.storage.query_cache import QueryCache

logger = logging.getLogger("shopdash.products")

PRODUCTS_KEY = ("products",)


def product_key(product_id: str) -> tuple[str, str]:
    return ("product", product_id)


class ProductService:
    """Fetch, create, update and delete products for the signed-in user.

    Reads go through the shared :class:`QueryCache`. Reads are withheld
    (``None``) while nobody is signed in; writes fail fast with
    :class:`NotAuthenticatedError` before touching the network.
    """

    def __init__(
        self,
        api: ApiClient,
        cache: QueryCache,
        session: SessionStore,
    ) -> None:
        self.api = api
        self.cache = cache
        self.session = session

    # ── Reads ────────────────────────────────────────────

    def list_products(self) -> list[Product] | None:
        """Return every product, or ``None`` when signed out."""
        if not self.session.is_authenticated:
            logger.debug("list_products withheld: no session")
            return None

        def load() -> list[Product]:
            payload = self.api.get(
                "/products", self.session.auth_headers()
            )
            if payload is None:
                payload = []
            if not isinstance(payload, list):
                raise RemoteApiError(
                    "Expected a product list from /products, "
                    f"got {type(payload).__name__}"
                )
            products = [_parse_product(p, "/products") for p in payload]
            logger.info("Loaded %d products", len(products))
            return products

        products: list[Product] = self.cache.fetch(PRODUCTS_KEY, load)
        return list(products)

    def get_product(self, product_id: str | None) -> Product | None:
        """Return one product, or ``None`` when signed out."""
        if not self.session.is_authenticated:
            logger.debug("get_product withheld: no session")
            return None
        if not product_id:
            raise NotFoundError("Missing product id")

        def load() -> Product:
            payload = self.api.get(
                f"/products/{product_id}", self.session.auth_headers()
            )
            if not payload:
                raise NotFoundError(f"Product {product_id} not found")
            return _parse_product(payload, f"/products/{product_id}")

        product: Product = self.cache.fetch(product_key(product_id), load)
        return product

    # ── Writes ───────────────────────────────────────────

    def create_product(self, draft: ProductDraft) -> Product | None:
        """Upload a new product with its images."""
        headers = self._require_identity()
        fields = {
            "name": draft.name,
            "price": _format_price(draft.price),
            "description": draft.description,
        }
        payload = self.api.post_multipart(
            "/products", fields, list(draft.images), headers
        )
        logger.info(
            "Created product '%s' with %d images",
            draft.name,
            len(draft.images),
        )
        self.cache.invalidate(PRODUCTS_KEY)
        return _product_or_none(payload)

    def update_product(self, update: ProductUpdate) -> Product | None:
        """Replace a product's fields and image set."""
        headers = self._require_identity()
        fields = {
            "name": update.name,
            "price": _format_price(update.price),
            "description": update.description,
            "existingImages": json.dumps(update.kept_existing_urls),
        }
        payload = self.api.put_multipart(
            f"/products/{update.id}",
            fields,
            list(update.new_images),
            headers,
        )
        logger.info(
            "Updated product %s (kept %d images, uploaded %d)",
            update.id,
            len(update.kept_existing_urls),
            len(update.new_images),
        )
        self.cache.invalidate(PRODUCTS_KEY)
        self.cache.invalidate(product_key(update.id))
        return _product_or_none(payload)

    def delete_product(self, product_id: str) -> str:
        """Delete a product and return its id."""
        headers = self._require_identity()
        self.api.delete(f"/products/{product_id}", headers)
        logger.info("Deleted product %s", product_id)
        self.cache.invalidate(PRODUCTS_KEY)
        return product_id

    def _require_identity(self) -> dict[str, str]:
        if not self.session.is_authenticated:
            raise NotAuthenticatedError()
        return self.session.auth_headers()


def _format_price(price: float) -> str:
    """Render a price the way a form field would send it.

    Always positional notation (``10000000000000000``, ``0.0000001``),
    never exponent form, with no trailing zeros.
    """
    return format(Decimal(repr(float(price))).normalize(), "f")


def _parse_product(payload: Any, path: str) -> Product:
    """Map one product document, rejecting bodies of the wrong shape."""
    if not isinstance(payload, dict):
        raise RemoteApiError(
            f"Expected a product object from {path}, "
            f"got {type(payload).__name__}"
        )
    try:
        return Product.from_api(payload)
    except (TypeError, ValueError) as exc:
        raise RemoteApiError(f"Malformed product from {path}: {exc}") from exc


def _product_or_none(payload: Any) -> Product | None:
    if isinstance(payload, dict) and payload.get("_id"):
        return _parse_product(payload, "write response")
    return None
