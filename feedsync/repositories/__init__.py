"""
Repository implementations
"""

from .base import BaseRepository
from .category import CategoryRepository
from .feed import FeedRepository
from .product import ProductRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "FeedRepository",
    "ProductRepository",
]
