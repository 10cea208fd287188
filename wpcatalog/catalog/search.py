"""
==============================================================================
Search Index Module
==============================================================================

Fuzzy search over a partition snapshot.

The index is rebuilt for every query from the snapshot passed in; nothing is
cached between queries. Catalog sizes are in the low thousands, so the
rebuild cost stays well under the request budget.

Ranking:
--------
- Each searchable field is scored with ``thefuzz`` token set ratio (0-100)
  against the case-folded query
- An item's score is its best field score
- Items under the score cutoff are dropped
- Highest score first; equal scores keep snapshot order
- At most ``limit`` items are returned

==============================================================================
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Sequence, Tuple, TypeVar

from thefuzz import fuzz


# Module logger
logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FIELDS: Tuple[str, ...] = ("name", "description")
DEFAULT_LIMIT = 20
DEFAULT_SCORE_CUTOFF = 60

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def _field_text(item: Any, field: str) -> str:
    """Read a searchable field from a model or a mapping as plain text."""
    if isinstance(item, dict):
        value = item.get(field)
    else:
        value = getattr(item, field, None)
    if not value:
        return ""
    text = html.unescape(_TAG_RE.sub(" ", str(value)))
    return _SPACE_RE.sub(" ", text).strip().lower()


@dataclass(frozen=True)
class SearchHit(Generic[T]):
    """One ranked search result."""

    item: T
    score: int
    position: int


class SearchIndex(Generic[T]):
    """
    Per-query fuzzy index over a snapshot.

    Attributes:
        fields: Item attributes searched
        limit: Maximum number of results
        score_cutoff: Minimum score for a hit

    Example:
        >>> index = SearchIndex(themes.values())
        >>> [p.name for p in index.search("foo")]
        ['Foo Bar']
    """

    def __init__(
        self,
        items: Sequence[T],
        fields: Sequence[str] = DEFAULT_FIELDS,
        limit: int = DEFAULT_LIMIT,
        score_cutoff: int = DEFAULT_SCORE_CUTOFF
    ) -> None:
        self.fields = tuple(fields)
        self.limit = limit
        self.score_cutoff = score_cutoff
        self._items = list(items)
        self._documents = [
            tuple(_field_text(item, field) for field in self.fields)
            for item in self._items
        ]

    def __len__(self) -> int:
        return len(self._items)

    def _score(self, query: str, document: Tuple[str, ...]) -> int:
        return max(
            (fuzz.token_set_ratio(query, text) for text in document if text),
            default=0
        )

    def hits(self, query: Optional[str]) -> List[SearchHit[T]]:
        """
        Rank the snapshot against ``query``.

        Args:
            query: Free-text query

        Returns:
            Ranked hits; empty for a blank query or when nothing matches
        """
        needle = _SPACE_RE.sub(" ", (query or "")).strip().lower()
        if not needle:
            return []

        hits = []
        for position, (item, document) in enumerate(zip(self._items, self._documents)):
            score = self._score(needle, document)
            if score >= self.score_cutoff:
                hits.append(SearchHit(item=item, score=score, position=position))

        # sorted() is stable: ties keep snapshot order
        hits = sorted(hits, key=lambda hit: -hit.score)

        logger.debug(f"Search '{needle}': {len(hits)} hits in {len(self._items)} items")
        return hits[:self.limit]

    def search(self, query: Optional[str]) -> List[T]:
        """Get the matching items, best first."""
        return [hit.item for hit in self.hits(query)]
