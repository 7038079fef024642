# shopdash/models/product.py

"""Product data model shared by services, forms and views."""

from dataclasses import dataclass, field
from typing import Any

from shopdash.models.local_file import LocalImageFile


@dataclass
class Product:
    """A catalog product as returned by the remote API."""

    id: str
    name: str
    price: float
    description: str = ""
    images: list[str] = field(default_factory=lambda: list[str]())
    created_at: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Product":
        """Build a Product from the remote API's JSON shape."""
        images = payload.get("images") or []
        return cls(
            id=str(payload.get("_id", "")),
            name=str(payload.get("name", "")),
            price=float(payload.get("price") or 0.0),
            description=payload.get("description") or "",
            images=[str(url) for url in images],
            created_at=payload.get("createdAt"),
        )

    @property
    def main_image(self) -> str | None:
        """First image URL, or ``None`` for an image-less product."""
        return self.images[0] if self.images else None


@dataclass
class ProductDraft:
    """Input for creating a product."""

    name: str
    price: float
    description: str
    images: list[LocalImageFile]


@dataclass
class ProductUpdate:
    """Input for updating a product.

    ``kept_existing_urls`` lists the already-hosted images to keep;
    ``new_images`` are local files to upload alongside them.
    """

    id: str
    name: str
    price: float
    description: str
    kept_existing_urls: list[str]
    new_images: list[LocalImageFile]
