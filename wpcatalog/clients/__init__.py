"""
==============================================================================
Clients Package - Upstream HTTP Access
==============================================================================

- WooCommerceClient: paginated product reads
- LinkProxyClient: download-link API key authorization

==============================================================================
"""

from .woocommerce import CatalogClient, WooCommerceClient
from .link_proxy import LinkAuthorizer, LinkProxyClient

__all__ = [
    "CatalogClient",
    "WooCommerceClient",
    "LinkAuthorizer",
    "LinkProxyClient",
]
