"""
Product models
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, Numeric, String
from sqlmodel import Field, SQLModel

from feedsync.utils.timestamps import utcnow


class ProductBase(SQLModel):
    """Base product attributes"""

    name: str
    description: Optional[str] = None
    price_dropship: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 2)))
    in_stock: bool = Field(default=False)

    # Primary image; the gallery never repeats it
    image_url: Optional[str] = None
    gallery_json: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))


class Product(ProductBase, table=True):
    """Product database model"""

    __tablename__ = "products"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    sku: str = Field(sa_column=Column(String, unique=True, index=True, nullable=False))
    category_id: Optional[UUID] = Field(default=None, foreign_key="categories.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
