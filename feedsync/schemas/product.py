"""
Write-ready product shape produced by the record builder
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class SkipReason(str, Enum):
    """Why an offer did not become a catalog record"""

    MISSING_SKU = "missing_sku"
    MISSING_NAME = "missing_name"
    INVALID_PRICE = "invalid_price"


class CanonicalProductRecord(BaseModel):
    """One supplier offer mapped onto catalog fields, keyed by SKU"""

    sku: str = Field(..., min_length=1)
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    in_stock: bool = False
    image_url: Optional[str] = None
    gallery: List[str] = Field(default_factory=list)

    # Supplier-side category reference, resolved to category_id before upsert
    category_ref: Optional[str] = None
    category_id: Optional[UUID] = None

    @field_validator("sku")
    @classmethod
    def sku_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("sku must not be blank")
        return value

    def full_row(self) -> Dict[str, Any]:
        """Every mapped column, for full imports"""
        return {
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "price_dropship": self.price,
            "in_stock": self.in_stock,
            "image_url": self.image_url,
            "gallery_json": list(self.gallery),
            "category_id": self.category_id,
        }

    def stock_row(self) -> Dict[str, Any]:
        """Availability only"""
        return {"sku": self.sku, "in_stock": self.in_stock}
