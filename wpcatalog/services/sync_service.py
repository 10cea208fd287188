"""
==============================================================================
Catalog Sync Service Module
==============================================================================

Full-catalog refresh from the upstream WooCommerce store.

This module implements:
- CycleBatch: products collected by one sync cycle
- SyncOrchestrator: runs one cycle (fetch → normalize → classify → replace)
- SyncTaskManager: background task running a cycle at startup and on a
  fixed interval

Cycle State Machine:
-------------------
    ┌──────┐       ┌─────────────┐ non-empty page ┌───────────────┐
    │ IDLE │ ────▶ │ FETCHING(1) │ ─────────────▶ │ FETCHING(n+1) │ ─┐
    └──────┘       └─────────────┘                └───────────────┘  │
        ▲                  │ empty page                  │           │
        │                  ▼                             │ empty     │
        │          ┌────────────┐ ◀──────────────────────┘ page      │
        └───────── │ FINALIZING │                                    │
        │          └────────────┘                                    │
        └─────────────────────────── fetch failure ◀─────────────────┘

A failed cycle discards everything it collected: the stores keep the
snapshot of the last successful cycle. Only one cycle runs at a time; a
trigger arriving while a cycle is in flight is skipped.

==============================================================================
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from wpcatalog.catalog.classifier import TypeClassifier
from wpcatalog.catalog.models import Partition, Product
from wpcatalog.catalog.normalizer import ProductNormalizer
from wpcatalog.catalog.store import CatalogStores
from wpcatalog.clients.woocommerce import CatalogClient
from wpcatalog.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


class SyncState(str, enum.Enum):
    """Sync orchestrator states."""

    IDLE = "idle"
    FETCHING = "fetching"
    FINALIZING = "finalizing"

    def __str__(self) -> str:
        return self.value


class SyncStatus(str, enum.Enum):
    """Outcome of a sync cycle."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"

    def __str__(self) -> str:
        return self.value


@dataclass
class CycleBatch:
    """
    Products collected by one cycle.

    Built from scratch for every cycle and handed to the stores only when
    the cycle completes.
    """

    items: Dict[str, Product] = field(default_factory=dict)
    themes: Dict[str, Product] = field(default_factory=dict)
    plugins: Dict[str, Product] = field(default_factory=dict)
    rejected: List[Dict[str, Any]] = field(default_factory=list)
    pages: int = 0

    def add(self, product: Product, partitions: List[Partition]) -> None:
        """Record a classified product; the last write per identifier wins."""
        key = product.key
        self.items[key] = product
        if Partition.THEMES in partitions:
            self.themes[key] = product
        if Partition.PLUGINS in partitions:
            self.plugins[key] = product

    def counts(self) -> Dict[str, int]:
        return {
            Partition.ALL.value: len(self.items),
            Partition.THEMES.value: len(self.themes),
            Partition.PLUGINS.value: len(self.plugins),
        }


@dataclass
class SyncResult:
    """Summary of one sync attempt."""

    status: SyncStatus
    started_at: datetime
    finished_at: Optional[datetime] = None
    pages: int = 0
    counts: Dict[str, int] = field(default_factory=dict)
    rejected: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_seconds": self.duration_seconds,
            "pages": self.pages,
            "counts": self.counts,
            "rejected": len(self.rejected),
            "error": self.error,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncOrchestrator:
    """
    Runs full-catalog sync cycles.

    Attributes:
        page_size: Products requested per page
        page_delay_seconds: Pause after each non-empty page
        page_timeout_seconds: Upper bound for one page fetch

    Example:
        >>> orchestrator = SyncOrchestrator(client, stores)
        >>> result = await orchestrator.run_cycle()
        >>> result.status
        <SyncStatus.SUCCESS: 'success'>
    """

    def __init__(
        self,
        client: CatalogClient,
        stores: CatalogStores,
        normalizer: Optional[ProductNormalizer] = None,
        classifier: Optional[TypeClassifier] = None,
        page_size: int = 100,
        page_delay_seconds: float = 3.0,
        page_timeout_seconds: float = 30.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            client: Upstream catalog client
            stores: Partition stores replaced at the end of a cycle
            normalizer: Record normalizer (default instance if None)
            classifier: Type classifier (default markers if None)
            page_size: Products per page
            page_delay_seconds: Delay between pages
            page_timeout_seconds: Timeout for one page fetch
            sleep: Coroutine used for the inter-page delay
        """
        self._client = client
        self._stores = stores
        self._normalizer = normalizer or ProductNormalizer()
        self._classifier = classifier or TypeClassifier()
        self.page_size = page_size
        self.page_delay_seconds = page_delay_seconds
        self.page_timeout_seconds = page_timeout_seconds
        self._sleep = sleep

        self._lock = asyncio.Lock()
        self._state = SyncState.IDLE
        self._page = 0
        self._last_result: Optional[SyncResult] = None
        self._last_success: Optional[SyncResult] = None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def page(self) -> int:
        """Page currently being fetched (0 when idle)."""
        return self._page

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    @property
    def last_result(self) -> Optional[SyncResult]:
        return self._last_result

    def status(self) -> Dict[str, Any]:
        """Get the orchestrator status for health reporting."""
        return {
            "state": self._state.value,
            "page": self._page,
            "running": self.is_running,
            "last_result": self._last_result.to_dict() if self._last_result else None,
            "last_success_at": (
                self._last_success.finished_at.isoformat()
                if self._last_success and self._last_success.finished_at
                else None
            ),
        }

    # =========================================================================
    # CYCLE
    # =========================================================================

    async def run_cycle(self) -> SyncResult:
        """
        Run one sync cycle unless one is already in flight.

        Returns:
            SyncResult; status SKIPPED when another cycle is running
        """
        if self._lock.locked():
            logger.info("⏭️ Sync cycle already running, skipping trigger")
            return SyncResult(status=SyncStatus.SKIPPED, started_at=_utcnow(), finished_at=_utcnow())

        async with self._lock:
            result = await self._run()

        self._last_result = result
        if result.status == SyncStatus.SUCCESS:
            self._last_success = result
        return result

    async def _run(self) -> SyncResult:
        result = SyncResult(status=SyncStatus.FAILED, started_at=_utcnow())
        batch = CycleBatch()
        logger.info("🔄 Catalog sync started")

        try:
            await self._fetch_all(batch)

            self._state = SyncState.FINALIZING
            self._page = 0
            await self._finalize(batch)

            result.status = SyncStatus.SUCCESS
            result.counts = batch.counts()
            logger.info(
                f"✅ Catalog sync finished: {result.counts['all']} products "
                f"({result.counts['themes']} themes, {result.counts['plugins']} plugins) "
                f"from {batch.pages} pages, {len(batch.rejected)} rejected"
            )

        except exceptions.UpstreamUnavailable as e:
            result.error = e.message
            logger.error(
                f"❌ Catalog sync aborted on page {self._page}: {e.message}; "
                f"keeping previous snapshot"
            )

        except SQLAlchemyError as e:
            result.error = "Failed to persist catalog snapshot"
            logger.error(f"❌ Catalog sync could not persist snapshot: {e}")

        finally:
            self._state = SyncState.IDLE
            self._page = 0
            result.finished_at = _utcnow()
            result.pages = batch.pages
            result.rejected = batch.rejected

        return result

    async def _fetch_all(self, batch: CycleBatch) -> None:
        page = 1
        while True:
            self._state = SyncState.FETCHING
            self._page = page

            records = await self._fetch_page(page)
            if not records:
                return

            self._ingest(batch, records)
            batch.pages = page
            page += 1

            await self._sleep(self.page_delay_seconds)

    async def _fetch_page(self, page: int) -> List[Dict[str, Any]]:
        try:
            return await asyncio.wait_for(
                self._client.fetch_page(page, self.page_size),
                timeout=self.page_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise exceptions.upstream_unavailable(
                f"Page {page} not received within {self.page_timeout_seconds}s"
            ) from e

    def _ingest(self, batch: CycleBatch, records: List[Dict[str, Any]]) -> None:
        products, rejected = self._normalizer.normalize_page(records)
        batch.rejected.extend(rejected)

        for product in products:
            partitions = self._classifier.classify(product)
            batch.add(product, partitions)

    async def _finalize(self, batch: CycleBatch) -> None:
        # Readers keep the old snapshot while the database write runs
        await asyncio.to_thread(
            self._stores.persist_all, batch.items, batch.themes, batch.plugins
        )
        self._stores.swap_all(batch.items, batch.themes, batch.plugins)


class SyncTaskManager:
    """
    Manager for the background sync task.

    Runs a cycle right away (when ``run_on_start``) and then once every
    ``interval_seconds``.

    Example:
        >>> manager = SyncTaskManager(orchestrator, interval_seconds=86400)
        >>> manager.start()  # Start background task
        >>> # ... application runs ...
        >>> manager.stop()   # Stop on shutdown
    """

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        interval_seconds: float,
        run_on_start: bool = True
    ) -> None:
        self._orchestrator = orchestrator
        self._interval_seconds = interval_seconds
        self._run_on_start = run_on_start
        self._task: Optional[asyncio.Task] = None
        self._manual_task: Optional[asyncio.Task] = None
        self._running = False

    async def _sync_loop(self) -> None:
        """Background sync loop."""
        logger.info(f"🔄 Sync background task started (every {self._interval_seconds:.0f}s)")
        run_now = self._run_on_start

        while self._running:
            try:
                if not run_now:
                    await asyncio.sleep(self._interval_seconds)
                run_now = False

                logger.debug("Running scheduled catalog sync...")
                await self._orchestrator.run_cycle()

            except asyncio.CancelledError:
                logger.info("🛑 Sync task cancelled")
                break
            except Exception as e:
                logger.exception(f"Sync task error: {e}")

    def start(self) -> asyncio.Task:
        """
        Start the background sync task.

        Returns:
            The asyncio Task object
        """
        if self._task is None or self._task.done():
            self._running = True
            self._task = asyncio.create_task(self._sync_loop())
            logger.info("✅ Sync task started")
        return self._task

    def trigger(self) -> asyncio.Task:
        """
        Run one cycle now, outside the schedule.

        Raises:
            SyncInProgress: If a cycle is already running
        """
        if self._orchestrator.is_running:
            raise exceptions.sync_in_progress()

        self._manual_task = asyncio.create_task(self._orchestrator.run_cycle())
        logger.info("▶️ Manual catalog sync triggered")
        return self._manual_task

    def stop(self) -> None:
        """Stop the background sync task."""
        self._running = False
        for task in (self._task, self._manual_task):
            if task and not task.done():
                task.cancel()
        logger.info("🛑 Sync task stopped")

    @property
    def is_running(self) -> bool:
        """Check if the background task is running."""
        return self._running and self._task is not None and not self._task.done()
