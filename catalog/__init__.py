"""
Read-only product catalog used by the matching engine.
"""

from catalog.base import Catalog, CatalogError, CatalogQuery, SortKey
from catalog.frame import DataFrameCatalog
from catalog.loader import load_catalog, get_catalog_statistics

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogQuery",
    "SortKey",
    "DataFrameCatalog",
    "load_catalog",
    "get_catalog_statistics",
]
