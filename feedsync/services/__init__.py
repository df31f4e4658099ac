"""
Service layer for feed ingestion
"""

from .category_resolver import CategoryResolver
from .feed_pipeline import FeedPipeline
from .fetcher import DocumentFetcher
from .orchestrator import FeedRunOrchestrator
from .upsert_engine import UpsertEngine
from .vendor_import import VendorImportService

__all__ = [
    "CategoryResolver",
    "DocumentFetcher",
    "FeedPipeline",
    "FeedRunOrchestrator",
    "UpsertEngine",
    "VendorImportService",
]
