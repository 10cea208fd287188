"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

import asyncio

from fastapi import APIRouter, Depends

from wpcatalog.core.dependencies import ServiceContainer, get_services


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, services: ServiceContainer):
        self._services = services

    def check_database(self) -> str:
        """Check database connectivity."""
        if self._services.db_manager.verify_connection():
            return "healthy"
        return "unhealthy"

    def check_catalog(self) -> dict:
        """Check catalog status."""
        counts = self._services.stores.counts()
        status = "healthy" if counts["all"] else "empty"
        return {"status": status, "counts": counts}

    def get_health(self) -> dict:
        """Get full health status."""
        db_status = self.check_database()
        catalog_info = self.check_catalog()
        sync_info = self._services.orchestrator.status()

        overall = "healthy" if db_status == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "database": db_status,
                "catalog": catalog_info["status"],
                "scheduler": "running" if self._services.sync_manager.is_running else "stopped",
            },
            "details": {
                "products_loaded": catalog_info["counts"],
                "sync": sync_info,
            }
        }


@router.get("")
async def health_check(services: ServiceContainer = Depends(get_services)):
    """
    Health check endpoint.

    Returns API, database, catalog and sync status. The database check
    runs in a worker thread.
    """
    controller = HealthController(services)
    return await asyncio.to_thread(controller.get_health)


@router.get("/ready")
async def readiness_check(services: ServiceContainer = Depends(get_services)):
    """Readiness probe: ready once a catalog snapshot is available."""
    return {"ready": len(services.stores.items) > 0}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
