"""
==============================================================================
Product Normalizer Module
==============================================================================

Maps one raw WooCommerce product record to a canonical Product.

Metadata Extraction:
-------------------
WooCommerce exposes custom fields as an unordered ``meta_data`` list of
``{key, value}`` pairs. Keys are not unique upstream: the first entry with a
matching key wins, and a missing key yields ``None``.

    ┌──────────────┬─────────────────┐
    │ Product      │ meta_data key   │
    ├──────────────┼─────────────────┤
    │ version      │ product-version │
    │ demoLink     │ demo-link       │
    │ free         │ is-free         │
    │ brand        │ brand           │
    │ popular      │ popular         │
    │ developer    │ developer       │
    │ demo-url     │ demo-url        │
    │ dev-url      │ dev-url         │
    └──────────────┴─────────────────┘

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from wpcatalog.core import exceptions
from .models import Category, Product, RawMeta, RawProduct


# Module logger
logger = logging.getLogger(__name__)


def get_meta(meta_data: Iterable[RawMeta], key: str) -> Optional[Any]:
    """
    Return the value of the first metadata entry with ``key``.

    Args:
        meta_data: Upstream metadata entries in upstream order
        key: Exact key to look up

    Returns:
        The matching value, or None when no entry has that key
    """
    for meta in meta_data:
        if meta.key == key:
            return meta.value
    return None


class ProductNormalizer:
    """
    Converts upstream records into canonical products.

    The returned product never carries a ``type``; classification is a
    separate step.

    Example:
        >>> normalizer = ProductNormalizer()
        >>> product = normalizer.normalize({"id": 7, "name": "Astra Pro"})
        >>> product.image
        ''
    """

    def parse(self, raw: Mapping[str, Any]) -> RawProduct:
        """
        Validate a raw record.

        Raises:
            ValidationError: If the record lacks an identifier or a name
        """
        try:
            return RawProduct.model_validate(raw)
        except PydanticValidationError as e:
            product_id = raw.get("id") if isinstance(raw, Mapping) else None
            reasons = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise exceptions.invalid_record(reasons, product_id) from e

    def normalize(self, raw: Mapping[str, Any]) -> Product:
        """
        Build a Product from one upstream record.

        Args:
            raw: Decoded JSON object from the products endpoint

        Returns:
            Product with ``type`` unset

        Raises:
            ValidationError: If the record lacks an identifier or a name
        """
        record = self.parse(raw)
        meta = record.meta_data

        image = (record.images[0].src or "") if record.images else ""

        return Product(
            product_id=record.id,
            name=record.name,
            version=get_meta(meta, "product-version"),
            image=image,
            description=record.description,
            permalink=record.permalink,
            demo_link=get_meta(meta, "demo-link"),
            last_update=record.date_modified_gmt,
            free=get_meta(meta, "is-free"),
            brand=get_meta(meta, "brand"),
            developer=get_meta(meta, "developer"),
            demo_url=get_meta(meta, "demo-url"),
            dev_url=get_meta(meta, "dev-url"),
            popular=get_meta(meta, "popular"),
            price=record.price,
            regular_price=record.regular_price,
            sale_price=record.sale_price,
            categories=[
                Category(name=term.name, slug=term.slug)
                for term in record.categories
            ],
            tags=[term.name for term in record.tags],
        )

    def normalize_page(self, records: Iterable[Mapping[str, Any]]) -> Tuple[List[Product], List[Dict[str, Any]]]:
        """
        Normalize a page of records, isolating per-record failures.

        Returns:
            Tuple of (products, rejected) where ``rejected`` holds one
            ``{"product_id", "error"}`` entry per skipped record
        """
        products: List[Product] = []
        rejected: List[Dict[str, Any]] = []

        for raw in records:
            try:
                products.append(self.normalize(raw))
            except exceptions.ValidationError as e:
                logger.warning(f"⚠️ Skipping record: {e.message}")
                rejected.append({
                    "product_id": e.details.get("product_id"),
                    "error": e.message,
                })

        return products, rejected
