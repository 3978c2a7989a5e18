"""
Database package exports for the in-memory catalog.
"""

from shopchat.database.catalog import (
    InMemoryProductSearch,
    InMemoryOrderLookup,
    load_catalog,
    CatalogError,
)

__all__ = ["InMemoryProductSearch", "InMemoryOrderLookup", "load_catalog", "CatalogError"]
