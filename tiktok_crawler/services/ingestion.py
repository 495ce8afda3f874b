"""Ingestion service - orchestrates extraction, catalog updates, stats and export."""

from pathlib import Path

from ..models import CatalogStats, CrawlOptions, FilterConfig, ProductRecord
from .catalog import Catalog
from .crawl import CrawlSimulator
from .export import export_records
from .extraction import ExtractionService
from .stats import compute_stats


class IngestionService:
    """Run text/URL extraction and keep the catalog up to date."""

    def __init__(
        self,
        extraction: ExtractionService,
        catalog: Catalog | None = None,
        crawler: CrawlSimulator | None = None,
    ):
        self.extraction = extraction
        self.catalog = catalog if catalog is not None else Catalog()
        self.crawler = crawler or CrawlSimulator(extraction)

    def ingest_text(self, text: str, filters: FilterConfig | None = None) -> list[ProductRecord]:
        """
        Extract products from pasted text and prepend them to the catalog.

        Returns the new batch (may be empty).
        """
        filters = filters or FilterConfig()
        records = self.extraction.extract_from_text(
            text,
            category_context=filters.category_constraint or "",
            filters=filters,
        )
        self.catalog.append_batch(records)
        return records

    def ingest_url(
        self,
        url: str,
        filters: FilterConfig | None = None,
        options: CrawlOptions | None = None,
    ) -> list[ProductRecord]:
        """Run a simulated crawl of url and prepend the result to the catalog."""
        records = self.crawler.run(url, filters, options)
        self.catalog.append_batch(records)
        return records

    def view(self, filters: FilterConfig | None = None, search: str = "") -> list[ProductRecord]:
        return self.catalog.filter(filters, search)

    def stats(self) -> CatalogStats:
        return compute_stats(self.catalog.records)

    def export(
        self,
        fmt: str,
        directory: str | Path = ".",
        filters: FilterConfig | None = None,
        search: str = "",
    ) -> Path:
        """Export the visible subset of the catalog."""
        return export_records(self.view(filters, search), fmt, directory)
