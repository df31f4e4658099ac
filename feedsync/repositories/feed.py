"""
Supplier feed configuration repository
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.models.feed import SupplierFeed
from feedsync.repositories.base import BaseRepository
from feedsync.utils.timestamps import utcnow


class FeedRepository(BaseRepository[SupplierFeed]):
    """Repository for feed configurations"""

    def __init__(self, session: AsyncSession):
        super().__init__(SupplierFeed, session)

    async def get_enabled(self) -> List[SupplierFeed]:
        """Enabled feeds in a stable order"""
        return await self.get_multi(filters={"enabled": True}, order_by="created_at")

    async def record_run(self, feed_id: UUID, status: str, when: Optional[datetime] = None) -> Optional[SupplierFeed]:
        """Store the outcome of a run on the feed row"""
        return await self.update(id=feed_id, values={"last_run": when or utcnow(), "last_status": status})
