"""Aggregate statistics over the catalog."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PriceBucket:
    name: str
    low: float    # inclusive
    high: float   # exclusive
    count: int = 0


@dataclass
class CatalogStats:
    total_products: int = 0
    avg_price: float = 0.0
    link_rate: int = 0          # percent of records with a product link
    total_revenue: float = 0.0
    price_distribution: list[PriceBucket] = field(default_factory=list)
    top_shops: list[tuple[str, int]] = field(default_factory=list)
    categories: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalProducts": self.total_products,
            "avgPrice": self.avg_price,
            "linkRate": self.link_rate,
            "totalRevenue": self.total_revenue,
            "priceDistribution": [{"name": b.name, "value": b.count} for b in self.price_distribution],
            "topShops": [{"name": name, "count": count} for name, count in self.top_shops],
            "categories": dict(self.categories),
        }
