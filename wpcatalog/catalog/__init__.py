"""
==============================================================================
Catalog Package - Product Ingestion & Storage
==============================================================================

Normalization, classification, partition storage and search for the
synchronized product catalog.

Classes:
--------
- Product / SearchRecord: Pydantic models for catalog items
- ProductNormalizer: raw upstream record → Product
- TypeClassifier: theme / plugin classification
- PartitionStore / CatalogStores: persisted partition snapshots
- SearchIndex: per-query fuzzy search

==============================================================================
"""

from .models import Category, Partition, Product, ProductType, RawProduct, SearchRecord
from .normalizer import ProductNormalizer, get_meta
from .classifier import TypeClassifier
from .store import CatalogStores, PartitionStore
from .search import SearchHit, SearchIndex

__all__ = [
    "Category",
    "Partition",
    "Product",
    "ProductType",
    "RawProduct",
    "SearchRecord",
    "ProductNormalizer",
    "get_meta",
    "TypeClassifier",
    "CatalogStores",
    "PartitionStore",
    "SearchHit",
    "SearchIndex",
]
