"""
==============================================================================
Type Classifier Module
==============================================================================

Assigns a product to the theme and/or plugin partition from its category
slugs.

Rules:
------
- A category slug equal to the theme marker marks the product as a theme
- A category slug equal to the plugin marker marks the product as a plugin
- Both may apply: the product goes into both partitions and its ``type``
  field carries the plugin marker (checked last)
- Neither leaves ``type`` unset; the product lives only in the all-items store

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .models import Partition, Product, ProductType


# Module logger
logger = logging.getLogger(__name__)

DEFAULT_THEME_SLUG = "wp-gpl-themes"
DEFAULT_PLUGIN_SLUG = "wp-gpl-plugins"


class TypeClassifier:
    """
    Category-slug based product classifier.

    Classification depends only on the product's categories, so running it
    again on an already classified product yields the same result.

    Attributes:
        theme_slug: Category slug marking themes
        plugin_slug: Category slug marking plugins

    Example:
        >>> classifier = TypeClassifier()
        >>> partitions = classifier.classify(product)
        >>> partitions
        [<Partition.THEMES: 'themes'>]
    """

    def __init__(
        self,
        theme_slug: str = DEFAULT_THEME_SLUG,
        plugin_slug: str = DEFAULT_PLUGIN_SLUG
    ) -> None:
        self.theme_slug = theme_slug
        self.plugin_slug = plugin_slug

    def partitions_for(self, product: Product) -> List[Partition]:
        """Get the type partitions a product belongs to, in marker order."""
        slugs = set(product.category_slugs)
        partitions = []
        if self.theme_slug in slugs:
            partitions.append(Partition.THEMES)
        if self.plugin_slug in slugs:
            partitions.append(Partition.PLUGINS)
        return partitions

    def type_for(self, product: Product) -> Optional[ProductType]:
        """Get the ``type`` value a product should carry."""
        partitions = self.partitions_for(product)
        if Partition.PLUGINS in partitions:
            return ProductType.PLUGIN
        if Partition.THEMES in partitions:
            return ProductType.THEME
        return None

    def classify(self, product: Product) -> List[Partition]:
        """
        Set ``product.type`` and return its type partitions.

        Args:
            product: Normalized product (mutated in place)

        Returns:
            Subset of [THEMES, PLUGINS]; empty when unclassified
        """
        partitions = self.partitions_for(product)
        product.type = self.type_for(product)

        if len(partitions) > 1:
            logger.debug(f"Product {product.key} matches both theme and plugin markers")

        return partitions
