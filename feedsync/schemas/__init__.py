"""
Pydantic schemas
"""

from .common import HealthCheckResponse
from .feed import (
    FeedRead,
    FeedRefreshRequest,
    FeedRefreshResponse,
    FeedRunResult,
    FeedRunSummary,
    VendorImportRequest,
    VendorImportResponse,
)
from .product import CanonicalProductRecord, SkipReason

__all__ = [
    "CanonicalProductRecord",
    "FeedRead",
    "FeedRefreshRequest",
    "FeedRefreshResponse",
    "FeedRunResult",
    "FeedRunSummary",
    "HealthCheckResponse",
    "SkipReason",
    "VendorImportRequest",
    "VendorImportResponse",
]
