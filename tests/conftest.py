"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides in-memory stores, fake upstream clients, record factories and an
API test client.

==============================================================================
"""

import os

# Keep the module-level app in wpcatalog.main off the network and disk
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SYNC_ENABLED", "false")

import pytest
from typing import Any, Callable, Dict, Generator, Iterable, List, Optional
from fastapi.testclient import TestClient

from wpcatalog.catalog.store import CatalogStores
from wpcatalog.config import Settings
from wpcatalog.core import exceptions
from wpcatalog.core.dependencies import ServiceContainer
from wpcatalog.db.database import DatabaseManager
from wpcatalog.main import create_app


# ============================================================================
# FAKE UPSTREAM CLIENTS
# ============================================================================

class FakeCatalogClient:
    """In-memory paginated catalog."""

    def __init__(
        self,
        pages: Optional[List[List[Dict[str, Any]]]] = None,
        fail_on_page: Optional[int] = None,
        products: Optional[Dict[str, Dict[str, Any]]] = None,
        broken_products: Iterable[str] = ()
    ):
        self.pages = pages or []
        self.fail_on_page = fail_on_page
        self.products = products or {}
        self.broken_products = set(broken_products)
        self.requested_pages: List[int] = []
        self.closed = False

    async def fetch_page(self, page: int, per_page: int) -> List[Dict[str, Any]]:
        self.requested_pages.append(page)
        if page == self.fail_on_page:
            raise exceptions.upstream_unavailable(f"Page {page} failed")
        if page <= len(self.pages):
            return self.pages[page - 1]
        return []

    async def get_product(self, product_id: str) -> Dict[str, Any]:
        if product_id in self.broken_products:
            raise exceptions.upstream_unavailable(f"Catalog API returned 500 for products/{product_id}")
        if product_id not in self.products:
            raise exceptions.product_not_found(product_id)
        return self.products[product_id]

    async def aclose(self) -> None:
        self.closed = True


class FakeLinkClient:
    """Accepts a fixed set of API keys."""

    def __init__(self, valid_keys: Iterable[str] = ("valid-key",)):
        self.valid_keys = set(valid_keys)
        self.seen_keys: List[str] = []

    async def authorize(self, api_key: str) -> bool:
        self.seen_keys.append(api_key)
        return api_key in self.valid_keys


async def no_sleep(seconds: float) -> None:
    return None


# ============================================================================
# RECORD FACTORIES
# ============================================================================

def make_record(
    product_id: Any,
    name: str,
    slugs: Iterable[str] = (),
    meta: Optional[Dict[str, Any]] = None,
    **overrides: Any
) -> Dict[str, Any]:
    """Build a raw WooCommerce product record."""
    record = {
        "id": product_id,
        "name": name,
        "description": "",
        "permalink": f"https://store.example/product/{product_id}",
        "date_modified_gmt": "2024-05-01T10:00:00",
        "price": "19.99",
        "regular_price": "29.99",
        "sale_price": "19.99",
        "meta_data": [
            {"id": index, "key": key, "value": value}
            for index, (key, value) in enumerate((meta or {}).items())
        ],
        "images": [{"id": 1, "src": f"https://cdn.example/{product_id}.png"}],
        "categories": [
            {"id": index, "name": slug.replace("-", " ").title(), "slug": slug}
            for index, slug in enumerate(slugs)
        ],
        "tags": [{"id": 1, "name": "gpl"}],
    }
    record.update(overrides)
    return record


def make_theme(product_id: Any, name: str, **kwargs: Any) -> Dict[str, Any]:
    return make_record(product_id, name, slugs=("wp-gpl-themes",), **kwargs)


def make_plugin(product_id: Any, name: str, **kwargs: Any) -> Dict[str, Any]:
    return make_record(product_id, name, slugs=("wp-gpl-plugins",), **kwargs)


@pytest.fixture
def record_factory() -> Callable[..., Dict[str, Any]]:
    return make_record


# ============================================================================
# STORAGE FIXTURES
# ============================================================================

@pytest.fixture
def db_manager() -> Generator[DatabaseManager, None, None]:
    """Fresh in-memory database with tables created."""
    manager = DatabaseManager("sqlite://")
    manager.create_tables()
    yield manager
    manager.dispose()


@pytest.fixture
def stores(db_manager: DatabaseManager) -> CatalogStores:
    return CatalogStores(db_manager)


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        sync_enabled=False,
        sync_page_delay_seconds=0,
        wc_url="https://store.example",
        link_endpoint_url="https://store.example",
    )


@pytest.fixture
def catalog_client() -> FakeCatalogClient:
    return FakeCatalogClient()


@pytest.fixture
def link_client() -> FakeLinkClient:
    return FakeLinkClient()


@pytest.fixture
def services(
    settings: Settings,
    db_manager: DatabaseManager,
    catalog_client: FakeCatalogClient,
    link_client: FakeLinkClient
) -> ServiceContainer:
    return ServiceContainer(
        settings,
        db_manager=db_manager,
        catalog_client=catalog_client,
        link_client=link_client,
    )


@pytest.fixture
def client(services: ServiceContainer) -> Generator[TestClient, None, None]:
    """Create test client over the fake services."""
    app = create_app(services.settings, services)
    with TestClient(app) as test_client:
        yield test_client
