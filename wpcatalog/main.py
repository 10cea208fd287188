"""
==============================================================================
WP Catalog API - Application Entry Point
==============================================================================

FastAPI application with:
- Catalog listing, fuzzy search and lookup endpoints
- Download link resolution
- Background catalog sync (startup + fixed interval)

Usage:
------
    # Development
    uvicorn wpcatalog.main:app --reload

    # Production
    uvicorn wpcatalog.main:app --host 0.0.0.0 --port 3000

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wpcatalog.config import Settings, get_settings
from wpcatalog.core.dependencies import ServiceContainer
from wpcatalog.core.exceptions import register_exception_handlers
from wpcatalog.api.router import api_router


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Startup and shutdown events
    - Middleware configuration
    - Router registration
    - Exception handler setup
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        services: Optional[ServiceContainer] = None
    ):
        """
        Initialize the application.

        Args:
            settings: Settings (global settings if None)
            services: Prebuilt service container (built from settings if None)
        """
        self._settings = settings or get_settings()
        self._services = services or ServiceContainer(self._settings)
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="Synchronized WordPress theme and plugin catalog",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )
        app.state.services = self._services

        self._configure_middleware(app)
        register_exception_handlers(app)
        app.include_router(api_router)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        self._startup()
        yield
        await self._shutdown()

    def _startup(self) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name}")
        logger.info("=" * 60)

        self._services.startup()

        logger.info("=" * 60)
        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(f"📍 Running on http://{self._settings.host}:{self._settings.port}")
        logger.info(f"📖 API Docs: http://{self._settings.host}:{self._settings.port}/docs")
        logger.info("=" * 60)

    async def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        await self._services.shutdown()
        logger.info("✅ Shutdown complete")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @property
    def services(self) -> ServiceContainer:
        return self._services

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[ServiceContainer] = None
) -> FastAPI:
    """Build a FastAPI application."""
    return Application(settings, services).app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application()
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wpcatalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
