"""
Category taxonomy models
"""
from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel, String
from uuid import UUID, uuid4

from feedsync.utils.timestamps import utcnow


class CategoryBase(SQLModel):
    """Base category attributes"""
    name: str
    sort_order: int = Field(default=0)


class Category(CategoryBase, table=True):
    """Category database model, unique by slug"""
    __tablename__ = "categories"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(sa_column=Column(String, unique=True, index=True, nullable=False))
    parent_id: Optional[UUID] = Field(foreign_key="categories.id", default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
