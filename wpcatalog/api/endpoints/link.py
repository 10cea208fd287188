"""
==============================================================================
Download Link Endpoints
==============================================================================

Resolves download links for customers holding a valid API key.

==============================================================================
"""

from fastapi import APIRouter, Depends

from wpcatalog.core.dependencies import get_link_service
from wpcatalog.schemas.common import ErrorResponse
from wpcatalog.schemas.link import LinkRequest, LinkResponse
from wpcatalog.services.link_service import LinkService


router = APIRouter(prefix="/link", tags=["Links"])


@router.post(
    "/{product_id}",
    response_model=LinkResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def get_download_link(
    product_id: str,
    data: LinkRequest,
    service: LinkService = Depends(get_link_service)
):
    """Authorize ``api_key`` and return the product's download URL."""
    url = await service.get_download_url(product_id, data.api_key)
    return LinkResponse(url=url)
