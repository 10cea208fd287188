"""
==============================================================================
Partition Store Module
==============================================================================

In-memory product snapshots persisted to the catalog database.

Classes:
--------
- PartitionStore: identifier → Product mapping for one partition
- CatalogStores: the all-items, themes and plugins stores plus the
  lightweight listing cache, replaced together at the end of a sync

Consistency Model:
-----------------
Readers only ever see a complete snapshot. Writers build a new mapping and
swap the reference; the previous mapping is never mutated.

    sync cycle ──▶ persist (worker thread, one transaction)
                       │
                       ▼
                  swap snapshots (event loop, no await in between)
                       │
                       ▼
              readers see the new cycle

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from wpcatalog.db.database import DatabaseManager
from wpcatalog.db.models import CatalogEntry
from .models import Partition, Product, SearchRecord


# Module logger
logger = logging.getLogger(__name__)


class PartitionStore:
    """
    Snapshot store for one partition.

    Attributes:
        partition: Partition this store holds

    Example:
        >>> store = PartitionStore(Partition.THEMES)
        >>> store.put("42", product)
        >>> store.get("42").name
        'Astra Pro'
    """

    def __init__(
        self,
        partition: Partition,
        db_manager: Optional[DatabaseManager] = None
    ) -> None:
        """
        Initialize an empty store.

        Args:
            partition: Partition name
            db_manager: Database used for persistence (memory only if None)
        """
        self.partition = partition
        self._db_manager = db_manager
        self._snapshot: Dict[str, Product] = {}

    # =========================================================================
    # READS
    # =========================================================================

    def get(self, product_id: object) -> Optional[Product]:
        """Get a product by identifier, None when absent."""
        return self._snapshot.get(str(product_id))

    def all(self) -> Dict[str, Product]:
        """Get a copy of the current mapping, in upstream order."""
        return dict(self._snapshot)

    def values(self) -> List[Product]:
        """Get the current products, in upstream order."""
        return list(self._snapshot.values())

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, product_id: object) -> bool:
        return str(product_id) in self._snapshot

    # =========================================================================
    # WRITES
    # =========================================================================

    def put(self, product_id: object, product: Product) -> None:
        """
        Insert or overwrite one product.

        Args:
            product_id: Product identifier
            product: Product to store
        """
        key = str(product_id)
        snapshot = dict(self._snapshot)
        snapshot[key] = product

        if self._db_manager is not None:
            position = list(snapshot).index(key)
            with self._db_manager.session_scope() as session:
                session.merge(self._entry(key, position, product))

        self._snapshot = snapshot

    def replace(self, mapping: Mapping[object, Product]) -> None:
        """
        Replace the whole store contents.

        The new contents start from an empty mapping: identifiers missing
        from ``mapping`` disappear.
        """
        snapshot = self._normalize(mapping)

        if self._db_manager is not None:
            with self._db_manager.session_scope() as session:
                self.write(session, snapshot)

        self.swap(snapshot)

    def write(self, session: Session, snapshot: Mapping[str, Product]) -> None:
        """Rewrite this partition's rows inside an open transaction."""
        session.query(CatalogEntry).filter(
            CatalogEntry.partition == self.partition.value
        ).delete(synchronize_session=False)

        session.add_all(
            self._entry(key, position, product)
            for position, (key, product) in enumerate(snapshot.items())
        )

    def swap(self, snapshot: Mapping[str, Product]) -> None:
        """Make ``snapshot`` the visible contents."""
        self._snapshot = dict(snapshot)

    def load(self) -> int:
        """
        Load the persisted snapshot into memory.

        Returns:
            Number of products loaded
        """
        if self._db_manager is None:
            return len(self._snapshot)

        with self._db_manager.session_scope() as session:
            rows = (
                session.query(CatalogEntry)
                .filter(CatalogEntry.partition == self.partition.value)
                .order_by(CatalogEntry.position)
                .all()
            )
            snapshot = {
                row.product_id: Product.model_validate(row.payload)
                for row in rows
            }

        self._snapshot = snapshot
        return len(snapshot)

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _normalize(mapping: Mapping[object, Product]) -> Dict[str, Product]:
        return {str(key): product for key, product in mapping.items()}

    def _entry(self, key: str, position: int, product: Product) -> CatalogEntry:
        return CatalogEntry(
            partition=self.partition.value,
            product_id=key,
            position=position,
            payload=product.to_json(),
        )

    def __repr__(self) -> str:
        return f"PartitionStore({self.partition.value!r}, products={len(self)})"


class CatalogStores:
    """
    The three partition stores and the listing cache.

    Attributes:
        items: All-items store
        themes: Themes store (subset of items)
        plugins: Plugins store (subset of items)

    Example:
        >>> stores = CatalogStores(db_manager)
        >>> stores.load()
        >>> stores.replace_all(items, themes, plugins)
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        self._db_manager = db_manager
        self.items = PartitionStore(Partition.ALL, db_manager)
        self.themes = PartitionStore(Partition.THEMES, db_manager)
        self.plugins = PartitionStore(Partition.PLUGINS, db_manager)
        self._records: List[SearchRecord] = []

    def store(self, partition: Partition) -> PartitionStore:
        """Get the store for a partition."""
        return {
            Partition.ALL: self.items,
            Partition.THEMES: self.themes,
            Partition.PLUGINS: self.plugins,
        }[partition]

    def records(self) -> List[SearchRecord]:
        """Get the lightweight listing of the all-items store."""
        return list(self._records)

    def counts(self) -> Dict[str, int]:
        return {
            Partition.ALL.value: len(self.items),
            Partition.THEMES.value: len(self.themes),
            Partition.PLUGINS.value: len(self.plugins),
        }

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def load(self) -> Dict[str, int]:
        """
        Restore all snapshots from the database.

        Returns:
            Product count per partition
        """
        for store in (self.items, self.themes, self.plugins):
            store.load()
        self._records = self._build_records(self.items.values())

        counts = self.counts()
        logger.info(
            f"✅ Loaded catalog snapshot: {counts['all']} products "
            f"({counts['themes']} themes, {counts['plugins']} plugins)"
        )
        return counts

    def persist_all(
        self,
        items: Mapping[object, Product],
        themes: Mapping[object, Product],
        plugins: Mapping[object, Product]
    ) -> None:
        """Write all three snapshots in a single transaction."""
        if self._db_manager is None:
            return

        with self._db_manager.session_scope() as session:
            self.items.write(session, PartitionStore._normalize(items))
            self.themes.write(session, PartitionStore._normalize(themes))
            self.plugins.write(session, PartitionStore._normalize(plugins))

    def swap_all(
        self,
        items: Mapping[object, Product],
        themes: Mapping[object, Product],
        plugins: Mapping[object, Product]
    ) -> None:
        """Make the three snapshots and the rebuilt listing visible."""
        items_snapshot = PartitionStore._normalize(items)
        records = self._build_records(items_snapshot.values())

        self.items.swap(items_snapshot)
        self.themes.swap(PartitionStore._normalize(themes))
        self.plugins.swap(PartitionStore._normalize(plugins))
        self._records = records

    def replace_all(
        self,
        items: Mapping[object, Product],
        themes: Mapping[object, Product],
        plugins: Mapping[object, Product]
    ) -> None:
        """Persist then swap all three snapshots."""
        self.persist_all(items, themes, plugins)
        self.swap_all(items, themes, plugins)

    @staticmethod
    def _build_records(products: Iterable[Product]) -> List[SearchRecord]:
        return [product.to_record() for product in products]
