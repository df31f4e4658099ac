"""
Supplier feed configuration model
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from feedsync.utils.timestamps import utcnow


class FeedMode(str, Enum):
    """How a feed run writes to the catalog"""

    FULL_IMPORT = "full_import"
    STOCK_ONLY = "stock_only"


class SupplierFeedBase(SQLModel):
    """Where a feed lives and how its offers map onto catalog fields"""

    name: str
    url: str

    # Dotted path from the document root to the repeated offer element
    item_path: str

    # Dotted paths relative to one offer
    sku_path: Optional[str] = None
    name_path: Optional[str] = None
    description_path: Optional[str] = None
    price_path: Optional[str] = None
    stock_path: Optional[str] = None
    photo_path: Optional[str] = Field(default=None, description="One or more paths separated by commas; {n} expands to 1..N")
    category_path: Optional[str] = None

    # Dotted path from the document root to the supplier's category listing
    category_list_path: Optional[str] = None

    mode: FeedMode = Field(default=FeedMode.STOCK_ONLY)
    vendor_profile: str = Field(default="generic")
    enabled: bool = Field(default=True)


class SupplierFeed(SupplierFeedBase, table=True):
    """Feed configuration row; last_run/last_status are written after each run"""

    __tablename__ = "supplier_feeds"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    last_run: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    last_status: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
