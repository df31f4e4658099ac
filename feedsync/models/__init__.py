"""
SQLModel database models
"""

from .category import Category
from .feed import FeedMode, SupplierFeed
from .product import Product

__all__ = [
    "Category",
    "FeedMode",
    "Product",
    "SupplierFeed",
]
