"""
==============================================================================
Query Service Module
==============================================================================

Read operations over the partition stores: listing, fuzzy search and
lookup by identifier.

Every call works on the snapshot current at the time of the call; a sync
finishing mid-request never yields a mix of two cycles.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from wpcatalog.catalog.models import Partition, Product, SearchRecord
from wpcatalog.catalog.search import DEFAULT_LIMIT, DEFAULT_SCORE_CUTOFF, SearchIndex
from wpcatalog.catalog.store import CatalogStores
from wpcatalog.core import exceptions


# Module logger
logger = logging.getLogger(__name__)

PartitionName = Union[Partition, str, None]


class QueryService:
    """
    Catalog read operations.

    Attributes:
        search_limit: Maximum results per search
        score_cutoff: Minimum fuzzy score for a hit

    Example:
        >>> service = QueryService(stores)
        >>> service.search("themes", "astra")
        [Product(...)]
        >>> service.get_by_id("42").name
        'Astra Pro'
    """

    def __init__(
        self,
        stores: CatalogStores,
        search_limit: int = DEFAULT_LIMIT,
        score_cutoff: int = DEFAULT_SCORE_CUTOFF
    ) -> None:
        self._stores = stores
        self.search_limit = search_limit
        self.score_cutoff = score_cutoff

    @staticmethod
    def resolve_partition(partition: PartitionName) -> Partition:
        """Map a partition name (``themes``, ``plugin`` ...) to a Partition."""
        if isinstance(partition, Partition):
            return partition
        return Partition.from_query(partition)

    # =========================================================================
    # LISTING
    # =========================================================================

    def list_all(self) -> List[Product]:
        """Get every product of the all-items store."""
        return self._stores.items.values()

    def list_records(self) -> List[SearchRecord]:
        """Get the lightweight listing of the all-items store."""
        return self._stores.records()

    def list_by_partition(self, partition: PartitionName) -> List[Product]:
        """Get every product of one partition."""
        return self._stores.store(self.resolve_partition(partition)).values()

    # =========================================================================
    # SEARCH
    # =========================================================================

    def search(self, partition: PartitionName, query: Optional[str]) -> List[Product]:
        """
        Fuzzy search one partition.

        Args:
            partition: Partition name; unknown names search all items
            query: Free-text query

        Returns:
            Up to ``search_limit`` products, best match first; empty for a
            blank query
        """
        resolved = self.resolve_partition(partition)
        snapshot = self._stores.store(resolved).values()

        index = SearchIndex(
            snapshot,
            limit=self.search_limit,
            score_cutoff=self.score_cutoff,
        )
        results = index.search(query)

        logger.debug(f"Search {resolved.value} for {query!r}: {len(results)} results")
        return results

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def get_by_id(self, product_id: object) -> Product:
        """
        Get one product by identifier, whatever its classification.

        Raises:
            NotFound: If no store holds the identifier
        """
        for store in (self._stores.items, self._stores.themes, self._stores.plugins):
            product = store.get(product_id)
            if product is not None:
                return product

        raise exceptions.product_not_found(str(product_id))
