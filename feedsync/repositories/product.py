"""
Product repository implementation
"""

from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from sqlalchemy import case, update
from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.core.logging import log
from feedsync.models.product import Product
from feedsync.repositories.base import BaseRepository
from feedsync.utils.timestamps import utcnow

# Columns a full import overwrites on SKU conflict
FULL_IMPORT_COLUMNS = (
    "name",
    "description",
    "price_dropship",
    "in_stock",
    "image_url",
    "gallery_json",
)

# Bound on the size of one IN (...) list
SKU_LOOKUP_BATCH = 500


class ProductRepository(BaseRepository[Product]):
    """Repository for product operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(Product, session)

    async def get_availability_by_skus(self, skus: Iterable[str]) -> Dict[str, bool]:
        """Map of stored SKU -> in_stock for the SKUs that already exist"""
        unique = list(dict.fromkeys(skus))
        found: Dict[str, bool] = {}
        for start in range(0, len(unique), SKU_LOOKUP_BATCH):
            batch = unique[start:start + SKU_LOOKUP_BATCH]
            statement = select(Product.sku, Product.in_stock).where(Product.sku.in_(batch))
            result = await self.session.exec(statement)
            for sku, in_stock in result.all():
                found[sku] = bool(in_stock)
        return found

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        statement = select(Product).where(Product.sku == sku)
        result = await self.session.exec(statement)
        return result.first()

    async def count(self) -> int:
        result = await self.session.exec(select(func.count()).select_from(Product))
        return result.one()

    async def upsert_full(self, rows: List[Dict[str, Any]]) -> int:
        """Insert rows or overwrite every mapped column of existing SKUs"""
        if not rows:
            return 0

        now = utcnow()
        stmt = self.insert().values([{**row, "id": uuid4(), "created_at": now, "updated_at": now} for row in rows])
        set_ = {column: stmt.excluded[column] for column in FULL_IMPORT_COLUMNS}
        # An unresolved or unmapped category keeps the stored one
        set_["category_id"] = func.coalesce(stmt.excluded.category_id, Product.__table__.c.category_id)
        set_["updated_at"] = now
        stmt = stmt.on_conflict_do_update(index_elements=["sku"], set_=set_)
        await self.execute_write(stmt, what=f"{len(rows)} products")

        log.debug("Upserted products", count=len(rows))
        return len(rows)

    async def update_availability(self, rows: List[Dict[str, Any]]) -> int:
        """Set in_stock for existing SKUs in one statement; other columns are untouched"""
        if not rows:
            return 0

        availability = {row["sku"]: bool(row["in_stock"]) for row in rows}
        stmt = (
            update(Product)
            .where(Product.sku.in_(list(availability)))
            .values(
                in_stock=case(availability, value=Product.sku, else_=Product.in_stock),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.execute_write(stmt, what=f"availability of {len(rows)} products")

        log.debug("Updated product availability", count=len(rows))
        return len(rows)
