"""
==============================================================================
WooCommerce Catalog Client
==============================================================================

Async read access to the WooCommerce REST products endpoint.

Endpoints Used:
--------------
- GET {wc_url}/wp-json/wc/v3/products?per_page=N&page=P
- GET {wc_url}/wp-json/wc/v3/products/{id}

Authentication uses the store's consumer key/secret over HTTP basic auth.
Every request is bounded by the configured timeout; any transport error,
timeout, non-2xx status or undecodable body surfaces as
``UpstreamUnavailable``.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from wpcatalog.config import Settings
from wpcatalog.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


class CatalogClient(Protocol):
    """Paginated read access to upstream product records."""

    async def fetch_page(self, page: int, per_page: int) -> List[Dict[str, Any]]:
        ...

    async def get_product(self, product_id: str) -> Dict[str, Any]:
        ...


class WooCommerceClient:
    """
    httpx based WooCommerce REST client.

    Attributes:
        base_url: Versioned REST base, e.g. ``https://shop.example/wp-json/wc/v3``

    Example:
        >>> client = WooCommerceClient.from_settings(get_settings())
        >>> records = await client.fetch_page(page=1, per_page=100)
        >>> await client.aclose()
    """

    def __init__(
        self,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        user_agent: str = "wpcatalog/1.0",
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Versioned REST base URL
            consumer_key: WooCommerce consumer key
            consumer_secret: WooCommerce consumer secret
            user_agent: User-Agent header value
            timeout_seconds: Timeout for each request
            transport: Custom httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            auth=(consumer_key, consumer_secret),
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            timeout=timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> WooCommerceClient:
        """Create a client from application settings."""
        if not settings.wc_url:
            logger.warning("⚠️ WC_URL is not set; catalog sync will fail")
        return cls(
            base_url=settings.catalog_api_url,
            consumer_key=settings.wc_consumer_key,
            consumer_secret=settings.wc_consumer_secret,
            user_agent=settings.user_agent,
            timeout_seconds=settings.upstream_timeout_seconds,
        )

    async def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        missing_product: Optional[str] = None
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise exceptions.upstream_unavailable(f"Timed out fetching {path}", url) from e
        except httpx.HTTPStatusError as e:
            if missing_product is not None and e.response.status_code == 404:
                raise exceptions.product_not_found(missing_product) from e
            raise exceptions.upstream_unavailable(
                f"Catalog API returned {e.response.status_code} for {path}", url
            ) from e
        except httpx.RequestError as e:
            raise exceptions.upstream_unavailable(f"Catalog API unreachable: {e}", url) from e
        except ValueError as e:
            raise exceptions.upstream_unavailable(f"Invalid JSON from catalog API for {path}", url) from e

    async def fetch_page(self, page: int, per_page: int) -> List[Dict[str, Any]]:
        """
        Fetch one page of products.

        Args:
            page: 1-based page number
            per_page: Page size

        Returns:
            Raw product records; empty once past the last page

        Raises:
            UpstreamUnavailable: On any request failure
        """
        data = await self._get("products", params={"per_page": per_page, "page": page})
        if not isinstance(data, list):
            raise exceptions.upstream_unavailable(
                f"Expected a list of products for page {page}, got {type(data).__name__}"
            )
        logger.debug(f"Fetched page {page}: {len(data)} records")
        return data

    async def get_product(self, product_id: str) -> Dict[str, Any]:
        """
        Fetch one product record.

        Raises:
            NotFound: If the store has no product with that identifier
            UpstreamUnavailable: On any request failure
        """
        data = await self._get(f"products/{product_id}", missing_product=product_id)
        if not isinstance(data, dict):
            raise exceptions.upstream_unavailable(f"Unexpected product payload for {product_id}")
        return data

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()
