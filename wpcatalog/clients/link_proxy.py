"""
==============================================================================
Download Link Authorization Client
==============================================================================

Checks a customer API key against the storefront's link endpoint:

    POST {link_endpoint_url}/wp-json/wpnova/v1/products_link
    X-Api-Key: <api_key>

The key is valid only when the endpoint answers with the JSON literal
``true``.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from wpcatalog.config import Settings
from wpcatalog.core import exceptions


# Module logger
logger = logging.getLogger(__name__)

LINK_PATH = "/wp-json/wpnova/v1/products_link"


class LinkAuthorizer(Protocol):
    async def authorize(self, api_key: str) -> bool:
        ...


class LinkProxyClient:
    """
    httpx client for the link authorization endpoint.

    Example:
        >>> client = LinkProxyClient("https://store.example")
        >>> await client.authorize("customer-key")
        True
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.url = f"{base_url.rstrip('/')}{LINK_PATH}"
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> LinkProxyClient:
        if not settings.link_endpoint_url:
            logger.warning("⚠️ LINK_ENDPOINT_URL is not set; download links will fail")
        return cls(
            base_url=settings.link_endpoint_url,
            timeout_seconds=settings.upstream_timeout_seconds,
        )

    async def authorize(self, api_key: str) -> bool:
        """
        Check an API key.

        Returns:
            True only when the endpoint answers ``true``; False when it
            rejects the key (401/403 or any other body)

        Raises:
            UpstreamUnavailable: When the endpoint cannot be reached or fails
        """
        headers = {"Content-Type": "text/plain", "X-Api-Key": api_key}
        try:
            response = await self._client.post(self.url, headers=headers)
            if response.status_code in (401, 403):
                return False
            response.raise_for_status()
            return response.json() is True
        except httpx.TimeoutException as e:
            raise exceptions.upstream_unavailable("Link endpoint timed out", self.url) from e
        except httpx.HTTPStatusError as e:
            raise exceptions.upstream_unavailable(
                f"Link endpoint returned {e.response.status_code}", self.url
            ) from e
        except httpx.RequestError as e:
            raise exceptions.upstream_unavailable(f"Link endpoint unreachable: {e}", self.url) from e
        except ValueError:
            logger.warning("Link endpoint answered with a non-JSON body")
            return False

    async def aclose(self) -> None:
        await self._client.aclose()
