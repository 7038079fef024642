# shopdash/filters/product_table.py

"""Filtering, sorting and pagination for the products table view."""

import logging
import math
from dataclasses import dataclass, field

from shopdash.config.settings import Settings
from shopdash.models.product import Product

logger = logging.getLogger("shopdash.filters")

SORTABLE_COLUMNS = ("name", "price")


@dataclass
class ProductTable:
    """Table state over a product list: global filter, sort and page.

    Sorting a column cycles ascending, descending, then unsorted.
    Changing the filter returns to the first page.
    """

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    page_size: int = Settings.TABLE_PAGE_SIZE
    global_filter: str = ""
    sort_column: str | None = None
    sort_descending: bool = False
    page_index: int = 0

    def set_products(self, products: list[Product]) -> None:
        self.products = list(products)
        self._clamp_page()

    def set_filter(self, text: str) -> None:
        self.global_filter = text
        self.page_index = 0

    def toggle_sort(self, column: str) -> None:
        if column not in SORTABLE_COLUMNS:
            raise ValueError(f"Column '{column}' is not sortable")
        if self.sort_column != column:
            self.sort_column = column
            self.sort_descending = False
        elif not self.sort_descending:
            self.sort_descending = True
        else:
            self.sort_column = None
            self.sort_descending = False

    def sort_indicator(self, column: str) -> str:
        if self.sort_column != column:
            return ""
        return "▼" if self.sort_descending else "▲"

    # ── Derived rows ─────────────────────────────────────

    def filtered(self) -> list[Product]:
        """Products whose name or description contains the filter text."""
        needle = self.global_filter.strip().lower()
        if not needle:
            return list(self.products)
        kept = [
            p
            for p in self.products
            if needle in p.name.lower()
            or needle in p.description.lower()
        ]
        logger.debug(
            "Filter '%s' kept %d of %d products",
            needle,
            len(kept),
            len(self.products),
        )
        return kept

    def sorted_rows(self) -> list[Product]:
        rows = self.filtered()
        if self.sort_column == "name":
            rows.sort(
                key=lambda p: p.name.lower(),
                reverse=self.sort_descending,
            )
        elif self.sort_column == "price":
            rows.sort(key=lambda p: p.price, reverse=self.sort_descending)
        return rows

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(len(self.filtered()) / self.page_size))

    def page_rows(self) -> list[Product]:
        """Rows visible on the current page."""
        self._clamp_page()
        start = self.page_index * self.page_size
        return self.sorted_rows()[start:start + self.page_size]

    # ── Paging ───────────────────────────────────────────

    @property
    def can_previous(self) -> bool:
        return self.page_index > 0

    @property
    def can_next(self) -> bool:
        return self.page_index < self.page_count - 1

    def next_page(self) -> None:
        if self.can_next:
            self.page_index += 1

    def previous_page(self) -> None:
        if self.can_previous:
            self.page_index -= 1

    def _clamp_page(self) -> None:
        self.page_index = min(self.page_index, self.page_count - 1)
