"""Record normalizer - turns the loosely-typed service response into ProductRecords."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from ..models.product import ProductRecord
from ..utils import estimate_revenue

logger = logging.getLogger(__name__)


class MalformedRecordError(Exception):
    """A raw record could not be normalized.

    Never raised by RecordNormalizer, which degrades bad fields instead.
    """
    pass


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _optional_text(value: Any) -> str | None:
    return _text(value) or None


class RecordNormalizer:
    """Assign ids and timestamps, default missing fields, derive revenue."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def normalize(self, raw_records: list[Any], provenance: str) -> list[ProductRecord]:
        """
        Normalize a raw batch. Output has the same length and order as input.

        Args:
            raw_records: Elements of the service response (any shape)
            provenance: Fallback rawContent label (e.g. "文本导入")

        Returns:
            One ProductRecord per input element
        """
        records = []
        for index, raw in enumerate(raw_records):
            if not isinstance(raw, dict):
                logger.warning(f"Raw record {index} is {type(raw).__name__}, not an object; using defaults")
                raw = {}
            records.append(self._normalize_one(raw, provenance))
        return records

    def _normalize_one(self, raw: dict[str, Any], provenance: str) -> ProductRecord:
        price = _text(raw.get("price"))
        sales_volume = _text(raw.get("salesVolume"))
        return ProductRecord(
            id=str(uuid.uuid4()),
            product_name=_text(raw.get("productName")),
            price=price,
            sales_volume=sales_volume,
            revenue=estimate_revenue(price, sales_volume),
            shop_name=_text(raw.get("shopName")),
            raw_content=_text(raw.get("rawContent")) or provenance,
            timestamp=self.clock(),
            product_link=_optional_text(raw.get("productLink")),
            shop_link=_optional_text(raw.get("shopLink")),
            category=_optional_text(raw.get("category")),
        )
