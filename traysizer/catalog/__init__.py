"""
Tray Catalog
============

Catalog collaborators consulted by the sizing engine:
- CatalogRepository contract (query by type, load, width, height)
- FrameCatalog: pandas-backed catalog built from records or CSV sheets
"""

from .base import CatalogRepository
from .frame import FrameCatalog, get_catalog

__all__ = [
    "CatalogRepository",
    "FrameCatalog",
    "get_catalog",
]
