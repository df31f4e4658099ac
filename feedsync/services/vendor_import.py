"""
Single-vendor YML import through the shared feed pipeline
"""
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.models.feed import FeedMode, SupplierFeed
from feedsync.schemas.feed import FeedRunResult
from feedsync.services.feed_pipeline import FeedPipeline
from feedsync.services.profiles import YML


def vendor_feed(url: str) -> SupplierFeed:
    """Transient feed configuration for an ad-hoc YML import; never persisted"""
    return SupplierFeed(
        name="yml import",
        url=url,
        item_path=YML.item_path,
        category_list_path=YML.category_list_path,
        mode=FeedMode.FULL_IMPORT,
        vendor_profile=YML.name,
        enabled=False,
    )


class VendorImportService:
    """Full import of one YML catalog URL with the yml vendor profile"""

    def __init__(self, session: AsyncSession, pipeline: Optional[FeedPipeline] = None):
        self.pipeline = pipeline or FeedPipeline(session)

    async def run(self, url: str) -> FeedRunResult:
        return await self.pipeline.run(vendor_feed(url), FeedMode.FULL_IMPORT)
