"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy infrastructure for partition snapshots.

Architecture:
------------
├── database.py   - DatabaseManager class, session factory
└── models.py     - CatalogEntry ORM model

==============================================================================
"""

from .database import Base, DatabaseManager
from .models import CatalogEntry

__all__ = [
    "Base",
    "DatabaseManager",
    "CatalogEntry",
]
