"""
==============================================================================
Main API Router
==============================================================================

Combines all endpoint routers. Products come last: its ``/{product_id}``
route would otherwise shadow ``/health`` and ``/sync``.

==============================================================================
"""

from fastapi import APIRouter

from wpcatalog.api.endpoints import health, sync, link, products


class MainAPIRouter:
    """
    Main API router combining all routes.

    Provides a single entry point for all API endpoints.
    """

    def __init__(self):
        """Initialize the main router with all sub-routers."""
        self._router = APIRouter()
        self._include_routers()

    def _include_routers(self) -> None:
        """Include all routers, catch-all last."""
        self._router.include_router(health.router)
        self._router.include_router(sync.router)
        self._router.include_router(link.router)
        self._router.include_router(products.router)

    @property
    def router(self):
        """Get the FastAPI router instance."""
        return self._router


# Create main API router instance
api_router = MainAPIRouter().router
