"""
==============================================================================
Partition Store Tests
==============================================================================
"""

from wpcatalog.catalog.models import Partition, ProductType
from wpcatalog.catalog.normalizer import ProductNormalizer
from wpcatalog.catalog.store import CatalogStores, PartitionStore
from wpcatalog.db.database import DatabaseManager

from conftest import make_record


def product(product_id, name, product_type=None):
    item = ProductNormalizer().normalize(make_record(product_id, name))
    item.type = product_type
    return item


class TestPartitionStore:
    """Single store contract."""

    def test_put_get_overwrite(self, db_manager: DatabaseManager):
        store = PartitionStore(Partition.THEMES, db_manager)

        store.put(1, product(1, "Old"))
        store.put("1", product(1, "New"))

        assert len(store) == 1
        assert store.get(1).name == "New"
        assert store.get("missing") is None

    def test_replace_drops_absent_keys(self, db_manager: DatabaseManager):
        """Replacing starts from an empty mapping."""
        store = PartitionStore(Partition.PLUGINS, db_manager)
        store.replace({1: product(1, "A"), 2: product(2, "B")})

        store.replace({3: product(3, "C")})

        assert list(store.all()) == ["3"]
        assert 1 not in store

    def test_previous_snapshot_untouched(self):
        """A mapping handed out before a replace does not change."""
        store = PartitionStore(Partition.ALL)
        store.replace({1: product(1, "A")})
        before = store.all()

        store.replace({2: product(2, "B")})

        assert list(before) == ["1"]
        assert list(store.all()) == ["2"]

    def test_persisted_and_reloaded_in_order(self, db_manager: DatabaseManager):
        """Snapshots survive a reload with their order."""
        store = PartitionStore(Partition.ALL, db_manager)
        store.replace({3: product(3, "C"), 1: product(1, "A"), 2: product(2, "B")})
        store.put(4, product(4, "D"))

        reloaded = PartitionStore(Partition.ALL, db_manager)
        assert reloaded.load() == 4
        assert [p.name for p in reloaded.values()] == ["C", "A", "B", "D"]

    def test_memory_only_store(self):
        store = PartitionStore(Partition.ALL)
        store.put(1, product(1, "A"))
        assert store.load() == 1


class TestCatalogStores:
    """The three stores together."""

    def test_replace_all_and_records(self, stores: CatalogStores):
        theme = product(1, "Theme", ProductType.THEME)
        loose = product(2, "Loose")

        stores.replace_all({1: theme, 2: loose}, {1: theme}, {})

        assert stores.counts() == {"all": 2, "themes": 1, "plugins": 0}
        records = [r.to_json() for r in stores.records()]
        assert records[0] == {
            "productID": 1,
            "name": "Theme",
            "description": "",
            "type": "theme",
            "image": "https://cdn.example/1.png",
        }
        assert records[1]["type"] is None

    def test_load_restores_every_partition(self, db_manager: DatabaseManager):
        plugin = product(5, "Plugin", ProductType.PLUGIN)
        CatalogStores(db_manager).replace_all({5: plugin}, {}, {5: plugin})

        restored = CatalogStores(db_manager)
        counts = restored.load()

        assert counts == {"all": 1, "themes": 0, "plugins": 1}
        assert restored.plugins.get(5).type == ProductType.PLUGIN
        assert [r.name for r in restored.records()] == ["Plugin"]

    def test_store_lookup(self, stores: CatalogStores):
        assert stores.store(Partition.THEMES) is stores.themes
        assert stores.store(Partition.PLUGINS) is stores.plugins
        assert stores.store(Partition.ALL) is stores.items
