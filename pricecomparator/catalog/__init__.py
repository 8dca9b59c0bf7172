"""Catalog collaborators the engine reads product and discount snapshots from."""

from pricecomparator.catalog.base import CatalogReader
from pricecomparator.catalog.memory import InMemoryCatalog
from pricecomparator.catalog.sql import SqlCatalog

__all__ = [
    "CatalogReader",
    "InMemoryCatalog",
    "SqlCatalog",
]
