"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Service wiring and dependency injection for the catalog endpoints.

This module implements:
- ServiceContainer: builds every collaborator once at startup
- FastAPI dependencies handing those collaborators to the endpoints

Dependency Hierarchy:
--------------------
                    ┌──────────────────┐
                    │ ServiceContainer │  (app.state.services)
                    └────────┬─────────┘
                             │
        ┌────────────────────┼────────────────────┐
        │                    │                    │
┌───────▼───────┐   ┌───────▼───────┐   ┌────────▼───────┐
│ QueryService  │   │  LinkService  │   │ SyncTaskManager│
└───────────────┘   └───────────────┘   └────────────────┘

Usage Examples:
--------------
    @router.get("/themes")
    async def themes(q: str, service: QueryService = Depends(get_query_service)):
        return service.search("themes", q)

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request

from wpcatalog.catalog.classifier import TypeClassifier
from wpcatalog.catalog.store import CatalogStores
from wpcatalog.clients.link_proxy import LinkAuthorizer, LinkProxyClient
from wpcatalog.clients.woocommerce import CatalogClient, WooCommerceClient
from wpcatalog.config import Settings
from wpcatalog.db.database import DatabaseManager
from wpcatalog.services.link_service import LinkService
from wpcatalog.services.query_service import QueryService
from wpcatalog.services.sync_service import SyncOrchestrator, SyncTaskManager


# Module logger
logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Holds the application's long-lived collaborators.

    Clients are created once here and shared by every request.

    Attributes:
        settings: Application settings
        db_manager: Snapshot database
        stores: Partition stores
        catalog_client: Upstream catalog client
        link_client: Link authorization client
        orchestrator: Sync cycle runner
        sync_manager: Background sync scheduler
        query_service: Read operations
        link_service: Download link resolution

    Example:
        >>> services = ServiceContainer(get_settings())
        >>> services.startup()
        >>> services.query_service.get_by_id("42")
    """

    def __init__(
        self,
        settings: Settings,
        db_manager: Optional[DatabaseManager] = None,
        catalog_client: Optional[CatalogClient] = None,
        link_client: Optional[LinkAuthorizer] = None
    ) -> None:
        """
        Build all collaborators.

        Args:
            settings: Application settings
            db_manager: Database (built from settings if None)
            catalog_client: Catalog client (WooCommerce client if None)
            link_client: Link authorizer (LinkProxyClient if None)
        """
        self.settings = settings
        self.db_manager = db_manager or DatabaseManager(settings.database_url, echo=settings.debug)
        self.stores = CatalogStores(self.db_manager)

        self.catalog_client = catalog_client or WooCommerceClient.from_settings(settings)
        self.link_client = link_client or LinkProxyClient.from_settings(settings)

        self.orchestrator = SyncOrchestrator(
            client=self.catalog_client,
            stores=self.stores,
            classifier=TypeClassifier(
                theme_slug=settings.theme_category_slug,
                plugin_slug=settings.plugin_category_slug,
            ),
            page_size=settings.sync_page_size,
            page_delay_seconds=settings.sync_page_delay_seconds,
            page_timeout_seconds=settings.upstream_timeout_seconds,
        )
        self.sync_manager = SyncTaskManager(
            self.orchestrator,
            interval_seconds=settings.sync_interval_seconds,
        )

        self.query_service = QueryService(
            self.stores,
            search_limit=settings.search_limit,
            score_cutoff=settings.search_score_cutoff,
        )
        self.link_service = LinkService(self.catalog_client, self.link_client)

    def startup(self) -> None:
        """Create tables, restore snapshots and start the scheduler."""
        self.db_manager.create_tables()
        self.stores.load()

        if self.settings.sync_enabled:
            self.sync_manager.start()
        else:
            logger.info("Catalog sync disabled by configuration")

    async def shutdown(self) -> None:
        """Stop the scheduler and release network and database resources."""
        self.sync_manager.stop()
        for client in (self.catalog_client, self.link_client):
            aclose = getattr(client, "aclose", None)
            if aclose is not None:
                await aclose()
        self.db_manager.dispose()


# =============================================================================
# FASTAPI DEPENDENCIES
# =============================================================================

def get_services(request: Request) -> ServiceContainer:
    """Get the container built at application startup."""
    return request.app.state.services


def get_query_service(services: ServiceContainer = Depends(get_services)) -> QueryService:
    return services.query_service


def get_link_service(services: ServiceContainer = Depends(get_services)) -> LinkService:
    return services.link_service


def get_sync_manager(services: ServiceContainer = Depends(get_services)) -> SyncTaskManager:
    return services.sync_manager
