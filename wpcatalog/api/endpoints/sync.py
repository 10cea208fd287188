"""
==============================================================================
Sync Endpoints
==============================================================================

Manual catalog refresh outside the fixed schedule.

==============================================================================
"""

from fastapi import APIRouter, Depends, status

from wpcatalog.core.dependencies import get_sync_manager
from wpcatalog.schemas.common import ErrorResponse, MessageResponse
from wpcatalog.services.sync_service import SyncTaskManager


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={409: {"model": ErrorResponse}},
)
async def trigger_sync(manager: SyncTaskManager = Depends(get_sync_manager)):
    """Start a catalog sync cycle in the background."""
    manager.trigger()
    return MessageResponse(message="Catalog sync started")
