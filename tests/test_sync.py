"""
==============================================================================
Catalog Sync Tests
==============================================================================

Drives SyncOrchestrator and SyncTaskManager against the in-memory fake
catalog. Coroutines run through asyncio.run.
"""

import asyncio
from typing import List

import pytest

from wpcatalog.catalog.models import ProductType
from wpcatalog.catalog.store import CatalogStores
from wpcatalog.core import exceptions
from wpcatalog.db.database import DatabaseManager
from wpcatalog.services.sync_service import (
    SyncOrchestrator,
    SyncState,
    SyncStatus,
    SyncTaskManager,
)

from conftest import FakeCatalogClient, make_plugin, make_record, make_theme, no_sleep


def orchestrator_for(client, stores, **kwargs) -> SyncOrchestrator:
    kwargs.setdefault("sleep", no_sleep)
    return SyncOrchestrator(client, stores, **kwargs)


class BlockingCatalogClient(FakeCatalogClient):
    """Holds page 1 until released."""

    def __init__(self, pages):
        super().__init__(pages)
        self.release = asyncio.Event()
        self.entered = asyncio.Event()

    async def fetch_page(self, page, per_page):
        if page == 1:
            self.entered.set()
            await self.release.wait()
        return await super().fetch_page(page, per_page)


class SlowCatalogClient(FakeCatalogClient):
    async def fetch_page(self, page, per_page):
        await asyncio.sleep(5)
        return []


# ============================================================================
# CYCLE TESTS
# ============================================================================

class TestSyncCycle:
    """One full cycle."""

    def test_theme_and_plugin_partitioned(self, stores: CatalogStores):
        client = FakeCatalogClient([[make_theme(1, "Foo Bar"), make_plugin(2, "Baz")]])

        result = asyncio.run(orchestrator_for(client, stores).run_cycle())

        assert result.status == SyncStatus.SUCCESS
        assert list(stores.items.all()) == ["1", "2"]
        assert list(stores.themes.all()) == ["1"]
        assert list(stores.plugins.all()) == ["2"]
        assert stores.themes.get(1).type == ProductType.THEME
        assert stores.plugins.get(2).type == ProductType.PLUGIN
        assert client.requested_pages == [1, 2]

    def test_paginates_until_empty_page(self, stores: CatalogStores):
        client = FakeCatalogClient([
            [make_theme(1, "One"), make_theme(2, "Two")],
            [make_plugin(3, "Three")],
        ])

        result = asyncio.run(orchestrator_for(client, stores, page_size=2).run_cycle())

        assert result.pages == 2
        assert result.counts == {"all": 3, "themes": 2, "plugins": 1}
        assert client.requested_pages == [1, 2, 3]

    def test_delay_after_each_non_empty_page(self, stores: CatalogStores):
        delays: List[float] = []

        async def record_sleep(seconds):
            delays.append(seconds)

        client = FakeCatalogClient([[make_theme(1, "One")], [make_theme(2, "Two")]])
        orchestrator = SyncOrchestrator(
            client, stores, page_delay_seconds=3.0, sleep=record_sleep
        )

        asyncio.run(orchestrator.run_cycle())

        assert delays == [3.0, 3.0]

    def test_stale_products_removed_next_cycle(self, stores: CatalogStores):
        first = FakeCatalogClient([[make_theme(1, "Old Theme"), make_plugin(2, "Kept")]])
        asyncio.run(orchestrator_for(first, stores).run_cycle())

        second = FakeCatalogClient([[make_plugin(2, "Kept")]])
        asyncio.run(orchestrator_for(second, stores).run_cycle())

        assert stores.items.get(1) is None
        assert len(stores.themes) == 0
        assert list(stores.plugins.all()) == ["2"]

    def test_invalid_record_skipped(self, stores: CatalogStores):
        client = FakeCatalogClient([[make_theme(1, "Good"), {"id": 2}, make_plugin(3, "Fine")]])

        result = asyncio.run(orchestrator_for(client, stores).run_cycle())

        assert result.status == SyncStatus.SUCCESS
        assert list(stores.items.all()) == ["1", "3"]
        assert len(result.rejected) == 1
        assert result.to_dict()["rejected"] == 1

    def test_unclassified_only_in_items(self, stores: CatalogStores):
        client = FakeCatalogClient([[make_record(9, "Bundle", slugs=("bundles",))]])

        asyncio.run(orchestrator_for(client, stores).run_cycle())

        assert stores.items.get(9).type is None
        assert len(stores.themes) == 0
        assert len(stores.plugins) == 0

    def test_dual_classified_in_both_partitions(self, stores: CatalogStores):
        record = make_record(4, "Hybrid", slugs=("wp-gpl-themes", "wp-gpl-plugins"))

        asyncio.run(orchestrator_for(FakeCatalogClient([[record]]), stores).run_cycle())

        assert 4 in stores.themes
        assert 4 in stores.plugins
        assert stores.items.get(4).type == ProductType.PLUGIN

    def test_last_duplicate_wins(self, stores: CatalogStores):
        client = FakeCatalogClient([
            [make_theme(1, "First Name")],
            [make_theme(1, "Second Name")],
        ])

        asyncio.run(orchestrator_for(client, stores).run_cycle())

        assert len(stores.items) == 1
        assert stores.themes.get(1).name == "Second Name"

    def test_snapshot_persisted(self, stores: CatalogStores, db_manager: DatabaseManager):
        client = FakeCatalogClient([[make_theme(1, "Foo Bar"), make_plugin(2, "Baz")]])
        asyncio.run(orchestrator_for(client, stores).run_cycle())

        restored = CatalogStores(db_manager)
        assert restored.load() == {"all": 2, "themes": 1, "plugins": 1}

    def test_state_back_to_idle(self, stores: CatalogStores):
        orchestrator = orchestrator_for(FakeCatalogClient([[make_theme(1, "A")]]), stores)

        asyncio.run(orchestrator.run_cycle())

        assert orchestrator.state == SyncState.IDLE
        assert orchestrator.page == 0
        assert orchestrator.status()["last_result"]["status"] == "success"
        assert orchestrator.status()["last_success_at"] is not None


# ============================================================================
# FAILURE TESTS
# ============================================================================

class TestSyncFailure:
    """Failed cycles keep the previous snapshot."""

    def seed(self, stores: CatalogStores):
        client = FakeCatalogClient([[make_theme(1, "Foo Bar"), make_plugin(2, "Baz")]])
        asyncio.run(orchestrator_for(client, stores).run_cycle())

    def test_page_failure_keeps_previous_snapshot(
        self,
        stores: CatalogStores,
        db_manager: DatabaseManager
    ):
        self.seed(stores)
        client = FakeCatalogClient(
            [[make_theme(7, "New One")], [make_theme(8, "New Two")]],
            fail_on_page=2,
        )

        result = asyncio.run(orchestrator_for(client, stores).run_cycle())

        assert result.status == SyncStatus.FAILED
        assert "Page 2" in result.error
        assert list(stores.items.all()) == ["1", "2"]
        assert list(stores.themes.all()) == ["1"]
        assert [r.name for r in stores.records()] == ["Foo Bar", "Baz"]

        restored = CatalogStores(db_manager)
        restored.load()
        assert list(restored.items.all()) == ["1", "2"]

    def test_page_timeout_fails_cycle(self, stores: CatalogStores):
        self.seed(stores)
        orchestrator = orchestrator_for(
            SlowCatalogClient(), stores, page_timeout_seconds=0.01
        )

        result = asyncio.run(orchestrator.run_cycle())

        assert result.status == SyncStatus.FAILED
        assert "not received" in result.error
        assert len(stores.items) == 2

    def test_next_cycle_recovers(self, stores: CatalogStores):
        failing = FakeCatalogClient([[make_theme(1, "A")]], fail_on_page=1)
        assert asyncio.run(orchestrator_for(failing, stores).run_cycle()).status == SyncStatus.FAILED
        assert len(stores.items) == 0

        working = FakeCatalogClient([[make_theme(1, "A")]])
        assert asyncio.run(orchestrator_for(working, stores).run_cycle()).status == SyncStatus.SUCCESS
        assert len(stores.items) == 1


# ============================================================================
# CONCURRENCY TESTS
# ============================================================================

class TestSyncConcurrency:
    """At most one cycle at a time."""

    def test_overlapping_trigger_skipped(self, stores: CatalogStores):
        async def scenario():
            client = BlockingCatalogClient([[make_theme(1, "A")]])
            orchestrator = orchestrator_for(client, stores)

            first = asyncio.create_task(orchestrator.run_cycle())
            await client.entered.wait()
            assert orchestrator.is_running
            assert orchestrator.state == SyncState.FETCHING

            second = await orchestrator.run_cycle()

            client.release.set()
            return await first, second, client.requested_pages

        first, second, pages = asyncio.run(scenario())

        assert second.status == SyncStatus.SKIPPED
        assert first.status == SyncStatus.SUCCESS
        assert pages == [1, 2]

    def test_reads_see_old_snapshot_during_cycle(self, stores: CatalogStores):
        async def scenario():
            seed = FakeCatalogClient([[make_theme(1, "Old")]])
            await orchestrator_for(seed, stores).run_cycle()

            client = BlockingCatalogClient([[make_theme(2, "New")]])
            task = asyncio.create_task(orchestrator_for(client, stores).run_cycle())
            await client.entered.wait()
            during = list(stores.items.all())

            client.release.set()
            await task
            return during, list(stores.items.all())

        during, after = asyncio.run(scenario())

        assert during == ["1"]
        assert after == ["2"]


# ============================================================================
# TASK MANAGER TESTS
# ============================================================================

class TestSyncTaskManager:
    """Background scheduling."""

    def test_runs_cycle_on_start(self, stores: CatalogStores):
        async def scenario():
            orchestrator = orchestrator_for(FakeCatalogClient([[make_theme(1, "A")]]), stores)
            manager = SyncTaskManager(orchestrator, interval_seconds=3600)

            manager.start()
            assert manager.is_running
            for _ in range(200):
                if orchestrator.last_result is not None:
                    break
                await asyncio.sleep(0.01)

            manager.stop()
            await asyncio.sleep(0)
            return orchestrator.last_result

        result = asyncio.run(scenario())

        assert result is not None
        assert result.status == SyncStatus.SUCCESS
        assert len(stores.items) == 1

    def test_trigger_while_running_raises(self, stores: CatalogStores):
        async def scenario():
            client = BlockingCatalogClient([[make_theme(1, "A")]])
            manager = SyncTaskManager(orchestrator_for(client, stores), interval_seconds=3600)

            task = manager.trigger()
            await client.entered.wait()

            with pytest.raises(exceptions.SyncInProgress):
                manager.trigger()

            client.release.set()
            return await task

        assert asyncio.run(scenario()).status == SyncStatus.SUCCESS

    def test_stop_before_start(self, stores: CatalogStores):
        manager = SyncTaskManager(orchestrator_for(FakeCatalogClient(), stores), interval_seconds=1)

        manager.stop()

        assert not manager.is_running
