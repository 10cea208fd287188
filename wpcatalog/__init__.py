"""
WP Catalog - synchronized WordPress theme and plugin catalog.

Mirrors a WooCommerce product catalog into local partition stores
(all items, themes, plugins) and serves listing, fuzzy search and
lookup endpoints over them.
"""

__version__ = "1.0.0"
