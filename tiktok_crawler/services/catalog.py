"""In-memory product catalog and the filter applied to it."""

import logging
import threading
from typing import Iterable

from ..models.filters import FilterConfig
from ..models.product import ProductRecord
from ..utils import parse_price, parse_sales

logger = logging.getLogger(__name__)


def matches(record: ProductRecord, filters: FilterConfig, search: str = "") -> bool:
    """True if the record satisfies the search term and every set constraint."""
    term = search.strip().lower()
    if term and term not in record.product_name.lower() and term not in record.shop_name.lower():
        return False

    category = filters.category_constraint
    if category is not None and record.category != category:
        return False

    price = parse_price(record.price)
    min_price = filters.min_price_value
    if min_price is not None and price < min_price:
        return False
    max_price = filters.max_price_value
    if max_price is not None and price > max_price:
        return False

    min_sales = filters.min_sales_value
    if min_sales is not None and (parse_sales(record.sales_volume) or 0.0) < min_sales:
        return False

    return True


def filter_records(
    records: Iterable[ProductRecord],
    filters: FilterConfig | None = None,
    search: str = "",
) -> list[ProductRecord]:
    """Return the visible subset, order preserved. Pure; no I/O."""
    filters = filters or FilterConfig()
    return [r for r in records if matches(r, filters, search)]


class Catalog:
    """Newest-first product store. Mutated only by append_batch and clear."""

    def __init__(self):
        self._records: list[ProductRecord] = []
        self._lock = threading.Lock()

    def append_batch(self, records: list[ProductRecord]) -> int:
        """Prepend a batch (batch order kept). Returns the new catalog size."""
        with self._lock:
            self._records = list(records) + self._records
            size = len(self._records)
        logger.info(f"Catalog: added {len(records)} records ({size} total)")
        return size

    def clear(self) -> int:
        """Remove every record. Returns how many were removed."""
        with self._lock:
            removed = len(self._records)
            self._records = []
        logger.info(f"Catalog: cleared {removed} records")
        return removed

    @property
    def records(self) -> tuple[ProductRecord, ...]:
        """Snapshot of the catalog, newest first."""
        with self._lock:
            return tuple(self._records)

    def filter(self, filters: FilterConfig | None = None, search: str = "") -> list[ProductRecord]:
        return filter_records(self.records, filters, search)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
