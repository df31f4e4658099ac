"""
Category repository implementation
"""
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.models.category import Category
from feedsync.repositories.base import BaseRepository
from feedsync.utils.timestamps import utcnow


class CategoryRepository(BaseRepository[Category]):
    """Repository for category operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(Category, session)

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        """Get category by slug"""
        statement = select(Category).where(Category.slug == slug)
        result = await self.session.exec(statement)
        return result.first()

    async def upsert_by_slug(self, *, name: str, slug: str, parent_id: Optional[UUID] = None) -> UUID:
        """Id of the category with this slug, creating it when absent"""
        stmt = self.insert().values(
            id=uuid4(),
            name=name,
            slug=slug,
            parent_id=parent_id,
            sort_order=0,
            created_at=utcnow(),
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=["slug"])
        await self.execute_write(stmt, what=f"category {slug}")

        category = await self.get_by_slug(slug)
        return category.id
