"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Endpoints for listing, searching and looking up catalog products.

    GET /                   lightweight listing of every product
    GET /themes?q=          top-20 theme matches
    GET /plugins?q=         top-20 plugin matches
    GET /search?q=&type=    search in the partition named by type
    GET /{product_id}       single product

This router ends with a catch-all path and must be included last.

==============================================================================
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query

from wpcatalog.catalog.models import Partition
from wpcatalog.core.dependencies import get_query_service
from wpcatalog.schemas.common import ErrorResponse
from wpcatalog.services.query_service import QueryService


router = APIRouter(tags=["Products"])


class ProductController:
    """Controller for product catalog operations."""

    def __init__(self, service: QueryService):
        self._service = service

    def list_records(self) -> List[dict]:
        """List the lightweight records of every product."""
        return [record.to_json() for record in self._service.list_records()]

    def search(self, partition: Union[Partition, str, None], query: Optional[str]) -> List[dict]:
        """Search a partition; a missing or blank query matches nothing."""
        return [product.to_json() for product in self._service.search(partition, query)]

    def get_by_id(self, product_id: str) -> dict:
        """Get product by identifier."""
        return self._service.get_by_id(product_id).to_json()


@router.get("/")
async def list_products(service: QueryService = Depends(get_query_service)):
    """List every product as a lightweight record."""
    controller = ProductController(service)
    return controller.list_records()


@router.get("/themes")
async def search_themes(
    q: Optional[str] = Query(None, max_length=200),
    service: QueryService = Depends(get_query_service)
):
    """Search themes (top 20)."""
    controller = ProductController(service)
    return controller.search(Partition.THEMES, q)


@router.get("/plugins")
async def search_plugins(
    q: Optional[str] = Query(None, max_length=200),
    service: QueryService = Depends(get_query_service)
):
    """Search plugins (top 20)."""
    controller = ProductController(service)
    return controller.search(Partition.PLUGINS, q)


@router.get("/search")
async def search_products(
    q: Optional[str] = Query(None, max_length=200),
    type: Optional[str] = Query(None, description="themes, plugins, or empty for all"),
    service: QueryService = Depends(get_query_service)
):
    """Search the partition named by ``type`` (top 20)."""
    controller = ProductController(service)
    return controller.search(type, q)


@router.get("/{product_id}", responses={404: {"model": ErrorResponse}})
async def get_product(product_id: str, service: QueryService = Depends(get_query_service)):
    """Get product by identifier."""
    controller = ProductController(service)
    return controller.get_by_id(product_id)
