"""
==============================================================================
API Endpoints
==============================================================================

Routers:
--------
- health: Health check endpoints
- sync: Manual catalog sync
- link: Download link resolution
- products: Product listing, search and lookup (catch-all, included last)

==============================================================================
"""

from . import health, sync, link, products

__all__ = ["health", "sync", "link", "products"]
