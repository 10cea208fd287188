"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM model backing the partition stores.

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                        catalog_entries                          │
    ├─────────────────────────────────────────────────────────────────┤
    │ partition (VARCHAR, PK)   all | themes | plugins                │
    │ product_id (VARCHAR, PK)                                        │
    │ position (INTEGER, NOT NULL)   upstream order within partition  │
    │ payload (JSON, NOT NULL)       serialized Product               │
    │ synced_at (DATETIME, NOT NULL)                                  │
    └─────────────────────────────────────────────────────────────────┘

A partition is always rewritten as a whole: every sync deletes the
partition's rows and inserts the new snapshot in the same transaction.

==============================================================================
"""

from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, Integer, String, func

from wpcatalog.db.database import Base


class CatalogEntry(Base):
    """
    One product inside one partition snapshot.

    Example:
        >>> entry = CatalogEntry(
        ...     partition="themes",
        ...     product_id="42",
        ...     position=0,
        ...     payload=product.to_json()
        ... )
    """

    __tablename__ = "catalog_entries"

    partition = Column(
        String(16),
        primary_key=True,
        doc="Partition name (all, themes, plugins)"
    )

    product_id = Column(
        String(64),
        primary_key=True,
        doc="Upstream product identifier"
    )

    position = Column(
        Integer,
        nullable=False,
        doc="Upstream order within the partition"
    )

    payload = Column(
        JSON,
        nullable=False,
        doc="Product serialized with its public JSON keys"
    )

    synced_at = Column(
        DateTime,
        default=func.now(),
        nullable=False,
        doc="Snapshot write timestamp"
    )

    def __repr__(self) -> str:
        return f"<CatalogEntry({self.partition}:{self.product_id})>"
