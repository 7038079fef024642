# tests/helpers.py

"""Builders shared by several test modules."""

from pathlib import Path
from typing import Any

from PIL import Image

from shopdash.models.product import Product


def make_product(
    product_id: str = "p1",
    name: str = "Desk Lamp",
    price: float = 10.0,
    images: list[str] | None = None,
    description: str = "",
) -> Product:
    """Create a minimal Product."""
    return Product(
        id=product_id,
        name=name,
        price=price,
        description=description,
        images=list(images or []),
    )


def product_payload(
    product_id: str = "p1", name: str = "Desk Lamp", price: float = 10.0,
) -> dict[str, Any]:
    """The remote API's JSON for a product."""
    return {
        "_id": product_id,
        "name": name,
        "price": price,
        "description": "",
        "images": [
            "https://res.example.com/img/upload/a.jpg",
            "https://res.example.com/img/upload/b.jpg",
            "https://res.example.com/img/upload/c.jpg",
        ],
        "createdAt": "2026-10-01T10:00:00.000Z",
    }


def write_png(directory: Path, name: str, size: tuple[int, int] = (64, 48)) -> Path:
    """Write a small solid-colour PNG and return its path."""
    path = directory / name
    Image.new("RGB", size, "steelblue").save(path, format="PNG")
    return path
