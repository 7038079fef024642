# shopdash/utils/image_urls.py

"""Display-time image URL transforms."""

from shopdash.config.settings import Settings


def transform_image_url(url: str | None, width: int, height: int) -> str | None:
    """Ask the image host for a filled, auto-format rendition.

    Inserts ``c_fill,w_{width},h_{height},q_auto,f_auto/`` right after the
    ``/upload/`` path segment. URLs without that segment come back as-is.
    """
    if not url:
        return url
    segment = Settings.IMAGE_UPLOAD_SEGMENT
    return url.replace(
        segment,
        f"{segment}c_fill,w_{width},h_{height},q_auto,f_auto/",
        1,
    )


def format_price(price: float) -> str:
    return f"{Settings.CURRENCY_SYMBOL}{price:.2f}"
