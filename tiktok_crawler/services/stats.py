"""Dashboard aggregates over a set of records."""

from collections import Counter
from typing import Iterable

from ..models.product import ProductRecord
from ..models.stats import CatalogStats, PriceBucket
from ..utils import parse_price

UNKNOWN_SHOP = "未知店铺"
UNCATEGORIZED = "未分类"
TOP_SHOPS = 5

PRICE_BUCKETS = [
    PriceBucket("< 20", 0, 20),
    PriceBucket("20-50", 20, 50),
    PriceBucket("50-100", 50, 100),
    PriceBucket("> 100", 100, float("inf")),
]


def compute_stats(records: Iterable[ProductRecord]) -> CatalogStats:
    """Totals, average price, link rate, price buckets, top shops, category counts."""
    records = list(records)
    total = len(records)
    if not total:
        return CatalogStats(price_distribution=list(PRICE_BUCKETS))

    prices = [parse_price(r.price) for r in records]
    with_links = sum(1 for r in records if r.product_link)

    buckets = [
        PriceBucket(b.name, b.low, b.high, sum(1 for p in prices if b.low <= p < b.high))
        for b in PRICE_BUCKETS
    ]

    shops = Counter(r.shop_name or UNKNOWN_SHOP for r in records)
    categories = Counter(r.category or UNCATEGORIZED for r in records)

    return CatalogStats(
        total_products=total,
        avg_price=round(sum(prices) / total, 2),
        link_rate=round(with_links / total * 100),
        total_revenue=sum(r.revenue for r in records),
        price_distribution=buckets,
        # most_common keeps first-seen order on ties
        top_shops=shops.most_common(TOP_SHOPS),
        categories=dict(categories),
    )
