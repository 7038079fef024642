# shopdash/forms/form_validator.py

"""Product form validation: collect every violation, not just the first."""

import logging
import math

from shopdash.config.settings import Settings

logger = logging.getLogger("shopdash.forms")

CREATE = "create"
EDIT = "edit"

_MIN_IMAGES_MESSAGES = {
    CREATE: "Please select at least {n} images",
    EDIT: "At least {n} images are required",
}


def coerce_price(text: str) -> float | None:
    """Parse a price field, or ``None`` if it is not a positive number."""
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class ProductFormValidator:
    """Validate product form fields before anything is sent."""

    @staticmethod
    def validate(
        name: str,
        price_text: str,
        image_count: int,
        mode: str = CREATE,
    ) -> dict[str, str]:
        """Check name, price and image count together.

        Returns a field-to-message mapping; empty means valid.
        """
        errors: dict[str, str] = {}

        if not name.strip():
            errors["name"] = "Name is required"

        if coerce_price(price_text) is None:
            errors["price"] = "Valid price is required"

        if image_count < Settings.MIN_IMAGES:
            errors["images"] = _MIN_IMAGES_MESSAGES[mode].format(
                n=Settings.MIN_IMAGES
            )
        elif image_count > Settings.MAX_IMAGES:
            errors["images"] = (
                f"Maximum {Settings.MAX_IMAGES} images allowed"
            )

        if errors:
            logger.debug(
                "Form validation failed (%s): %s",
                mode,
                ", ".join(sorted(errors)),
            )

        return errors
