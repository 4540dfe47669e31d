"""
Catalog persistence.
"""

from .base import CatalogStore
from .dynamodb import DynamoCatalogStore
from .memory import InMemoryCatalogStore

__all__ = ["CatalogStore", "DynamoCatalogStore", "InMemoryCatalogStore"]
