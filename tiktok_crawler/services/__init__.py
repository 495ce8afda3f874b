"""Business logic services."""

from .catalog import Catalog, filter_records
from .crawl import CrawlInProgressError, CrawlSimulator, InvalidTransitionError
from .export import ExportError, export_records
from .extraction import EmptyInputError, ExtractionMode, ExtractionService, ExtractionServiceError
from .ingestion import IngestionService
from .normalizer import MalformedRecordError, RecordNormalizer
from .stats import compute_stats

__all__ = [
    "Catalog",
    "CrawlInProgressError",
    "CrawlSimulator",
    "EmptyInputError",
    "ExportError",
    "ExtractionMode",
    "ExtractionService",
    "ExtractionServiceError",
    "IngestionService",
    "InvalidTransitionError",
    "MalformedRecordError",
    "RecordNormalizer",
    "compute_stats",
    "export_records",
    "filter_records",
]
