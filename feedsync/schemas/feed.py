"""
Feed configuration and feed run schemas
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from feedsync.models.feed import FeedMode


class FeedRead(BaseModel):
    """Schema for reading a feed configuration"""

    id: UUID
    name: str
    url: str
    mode: FeedMode
    vendor_profile: str
    enabled: bool
    last_run: Optional[datetime] = None
    last_status: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class FeedRefreshRequest(BaseModel):
    """Run every enabled feed in one mode, or a single feed in its own mode"""

    op: Optional[FeedMode] = Field(None, description="Mode applied to all enabled feeds")
    feed_id: Optional[UUID] = Field(None, description="Run only this feed, using its configured mode")


class FeedRefreshResponse(BaseModel):
    ok: bool
    updated: Optional[int] = None
    error: Optional[str] = None


class VendorImportRequest(BaseModel):
    url: Optional[str] = None


class VendorImportResponse(BaseModel):
    """Summary of a single-vendor import"""

    ok: bool
    url: str
    offers: int = Field(..., description="Offers found in the document")
    created: int = Field(..., description="SKUs that were new to the catalog")
    updatedStock: int = Field(
        ...,
        description="Existing SKUs rewritten by the import; every mapped field is overwritten, not only availability",
    )
    skippedNoSku: int = Field(..., description="Offers dropped for lack of a SKU")
    errors: List[str] = Field(default_factory=list)


class FeedRunResult(BaseModel):
    """Counters for one feed run; condensed into the feed's status string"""

    feed_id: Optional[UUID] = None
    mode: FeedMode
    seen: int = 0
    created: int = 0
    updated: int = 0
    written: int = 0
    skipped_missing_sku: int = 0
    skipped_missing_name: int = 0
    skipped_invalid_price: int = 0
    errors: List[str] = Field(default_factory=list)

    # Set when the feed run aborted (fetch, parse or write failure)
    failure: Optional[str] = None

    @property
    def skipped(self) -> int:
        return self.skipped_missing_sku + self.skipped_missing_name + self.skipped_invalid_price

    @property
    def ok(self) -> bool:
        return self.failure is None

    def status_line(self) -> str:
        if self.failure is not None:
            return f"error: {self.failure}"
        return f"ok: {self.written}"


class FeedRunSummary(BaseModel):
    """Aggregate of a multi-feed run"""

    updated: int = 0
    results: List[FeedRunResult] = Field(default_factory=list)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.ok)
