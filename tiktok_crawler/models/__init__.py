"""Data models."""

from .crawl import CrawlLogEntry, CrawlOptions, CrawlState
from .filters import FilterConfig
from .product import ProductRecord, RawProductRecord
from .stats import CatalogStats, PriceBucket

__all__ = [
    "CatalogStats",
    "CrawlLogEntry",
    "CrawlOptions",
    "CrawlState",
    "FilterConfig",
    "PriceBucket",
    "ProductRecord",
    "RawProductRecord",
]
