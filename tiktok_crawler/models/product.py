"""Product model - one catalog entry produced by the normalizer."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

# Untrusted element of the service response: any field may be missing or mistyped
RawProductRecord = dict[str, Any]


@dataclass(frozen=True)
class ProductRecord:
    """A product in canonical, typed form."""

    id: str
    product_name: str
    price: str               # free text, keeps currency symbol ("$15.99", "¥29.9")
    sales_volume: str        # free text, may carry k/w/m suffix, may be empty
    revenue: float           # heuristic price x sales estimate, always >= 0
    shop_name: str
    raw_content: str
    timestamp: datetime
    product_link: str | None = None
    shop_link: str | None = None
    category: str | None = None  # None = uncategorized

    def to_dict(self) -> dict[str, Any]:
        """Render in the camelCase wire shape."""
        return {
            "id": self.id,
            "productName": self.product_name,
            "price": self.price,
            "salesVolume": self.sales_volume,
            "revenue": self.revenue,
            "productLink": self.product_link,
            "shopName": self.shop_name,
            "shopLink": self.shop_link,
            "rawContent": self.raw_content,
            "timestamp": self.timestamp.isoformat(),
            "category": self.category,
        }
