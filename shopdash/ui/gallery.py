# shopdash/ui/gallery.py

"""Image gallery state for the product detail screen."""

from dataclasses import dataclass, field

from shopdash.utils.image_urls import transform_image_url


@dataclass
class Gallery:
    """Active image index over a product's images, wrapping at both ends."""

    images: list[str] = field(default_factory=lambda: list[str]())
    active_index: int = 0

    @property
    def has_images(self) -> bool:
        return bool(self.images)

    @property
    def active(self) -> str | None:
        if not self.images:
            return None
        return self.images[self.active_index]

    def select(self, index: int) -> None:
        if 0 <= index < len(self.images):
            self.active_index = index

    def next(self) -> None:
        if self.images:
            self.active_index = (self.active_index + 1) % len(self.images)

    def previous(self) -> None:
        if self.images:
            self.active_index = (self.active_index - 1) % len(self.images)

    def caption(self) -> str:
        if not self.images:
            return "No images"
        return f"Image {self.active_index + 1} of {len(self.images)}"

    def main_url(self) -> str | None:
        return transform_image_url(self.active, 800, 800)

    def large_url(self) -> str | None:
        return transform_image_url(self.active, 1200, 800)

    def thumbnail_urls(self) -> list[str]:
        return [
            transform_image_url(url, 150, 150) or url for url in self.images
        ]
