"""
==============================================================================
Download Link Service Module
==============================================================================

Resolves a product's download URL for a customer holding a valid API key.

Flow:
-----
1. Authorize the API key against the link endpoint
2. Fetch the product record from the catalog API
3. Return the first download file URL

==============================================================================
"""

from __future__ import annotations

import logging

from wpcatalog.clients.link_proxy import LinkAuthorizer
from wpcatalog.clients.woocommerce import CatalogClient
from wpcatalog.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


class LinkService:
    """
    Download link resolution.

    Example:
        >>> service = LinkService(catalog_client, link_client)
        >>> await service.get_download_url("42", api_key="customer-key")
        'https://cdn.example/astra-pro.zip'
    """

    def __init__(self, catalog_client: CatalogClient, authorizer: LinkAuthorizer) -> None:
        self._catalog_client = catalog_client
        self._authorizer = authorizer

    async def get_download_url(self, product_id: str, api_key: str) -> str:
        """
        Resolve the first download file of a product.

        Raises:
            LinkUnauthorized: If the API key is rejected
            NotFound: If the product is unknown upstream or has no download file
            UpstreamUnavailable: If an upstream call fails
        """
        if not await self._authorizer.authorize(api_key):
            logger.info(f"Link request for product {product_id} rejected")
            raise exceptions.link_unauthorized()

        product = await self._catalog_client.get_product(product_id)
        downloads = product.get("downloads") or []
        first = downloads[0] if downloads else None
        file_url = first.get("file") if isinstance(first, dict) else None

        if not file_url:
            raise exceptions.no_downloads(product_id)

        logger.info(f"🔗 Download link resolved for product {product_id}")
        return file_url
