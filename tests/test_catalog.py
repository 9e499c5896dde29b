"""
Tests for the catalog store and its persisted snapshot
"""
from dataclasses import replace

import pytest

from shopcore.catalog import CatalogStore
from shopcore.defaults import default_catalog
from shopcore.models import QuerySpec, SORT_PRICE_ASC
from shopcore.storage import CATALOG_KEY


def _new_laptop(**overrides):
    fields = {
        "name": "Gamma Pad",
        "brand": "Acme",
        "price": 749.0,
        "processor": "Intel i3",
        "condition": "used",
    }
    fields.update(overrides)
    return fields


class TestInitialize:
    """Startup reconciliation with storage."""

    def test_first_run_seeds_defaults_and_persists(self, storage):
        store = CatalogStore(storage)
        store.initialize()

        assert [it.id for it in store.list()] == [it.id for it in default_catalog()]
        assert len(storage.load_json(CATALOG_KEY)) == 8

    def test_loads_persisted_snapshot(self, storage, item_a, item_b):
        storage.save_json(CATALOG_KEY, [item_b.to_dict(), item_a.to_dict()])
        store = CatalogStore(storage)
        store.initialize()

        assert store.list() == [item_b, item_a]

    def test_malformed_json_falls_back_to_defaults(self, storage):
        storage.save(CATALOG_KEY, "[{oops")
        store = CatalogStore(storage)
        store.initialize()

        assert len(store.list()) == 8
        assert len(storage.load_json(CATALOG_KEY)) == 8

    def test_invalid_record_falls_back_to_defaults(self, storage, item_a):
        bad = item_a.to_dict()
        bad["condition"] = "mint"
        storage.save_json(CATALOG_KEY, [bad])
        store = CatalogStore(storage)
        store.initialize()

        assert store.get("A") is None
        assert len(store.list()) == 8

    @pytest.mark.parametrize(
        "field, value",
        [
            ("processor", None),
            ("name", 123),
            ("in_stock", "false"),
            ("price", "cheap"),
        ],
    )
    def test_wrong_typed_record_falls_back_to_defaults(self, storage, item_a, field, value):
        bad = item_a.to_dict()
        bad[field] = value
        storage.save_json(CATALOG_KEY, [bad])
        store = CatalogStore(storage)
        store.initialize()

        assert store.get("A") is None
        assert len(store.list()) == 8
        assert len(store.view(QuerySpec(term="zz"))) == 0
        assert len(store.view(QuerySpec())) == 8

    def test_string_in_stock_does_not_make_item_addable(self, storage, item_b):
        bad = item_b.to_dict()
        bad["in_stock"] = "false"
        storage.save_json(CATALOG_KEY, [bad])
        store = CatalogStore(storage)
        store.initialize()

        assert store.get("B") is None
        assert all(isinstance(it.in_stock, bool) for it in store.list())

    def test_non_list_payload_falls_back_to_defaults(self, storage):
        storage.save_json(CATALOG_KEY, {"items": []})
        store = CatalogStore(storage)
        store.initialize()

        assert len(store.list()) == 8

    def test_duplicate_ids_fall_back_to_defaults(self, storage, item_a):
        storage.save_json(CATALOG_KEY, [item_a.to_dict(), item_a.to_dict()])
        store = CatalogStore(storage)
        store.initialize()

        assert store.get("A") is None

    def test_empty_snapshot_reseeds(self, storage):
        storage.save_json(CATALOG_KEY, [])
        store = CatalogStore(storage)
        store.initialize()

        assert len(store.list()) == 8

    def test_initialize_again_rereads_storage(self, catalog, storage, item_a):
        storage.save_json(CATALOG_KEY, [item_a.to_dict()])
        catalog.initialize()
        assert catalog.list() == [item_a]

        catalog.initialize()
        assert catalog.list() == [item_a]

    def test_teardown_keeps_storage(self, catalog, storage):
        catalog.teardown()

        assert catalog.list() == []
        assert len(storage.load_json(CATALOG_KEY)) == 8


class TestCreate:
    def test_assigns_id_and_appends(self, catalog):
        item = catalog.create(_new_laptop())

        assert item.id
        assert catalog.list()[-1] == item
        assert catalog.get(item.id) == item

    def test_ignores_supplied_id(self, catalog):
        item = catalog.create(_new_laptop(id="1"))
        assert item.id != "1"

    def test_ids_are_unique(self, catalog):
        created = [catalog.create(_new_laptop(name=f"Pad {i}")) for i in range(50)]
        ids = [it.id for it in catalog.list()]

        assert len(set(ids)) == len(ids)
        assert len({it.id for it in created}) == 50

    def test_is_persisted(self, catalog, storage):
        item = catalog.create(_new_laptop())

        reopened = CatalogStore(storage)
        reopened.initialize()
        assert reopened.get(item.id) == item


class TestUpdate:
    def test_replaces_in_place(self, catalog):
        original = catalog.list()
        target = original[2]
        changed = replace(target, price=1111.0, in_stock=False)

        assert catalog.update(changed) is True
        after = catalog.list()
        assert after[2] == changed
        assert [it.id for it in after] == [it.id for it in original]

    def test_unknown_id_is_noop(self, catalog, storage, item_a):
        before = catalog.list()
        stored = storage.load("catalog")

        assert catalog.update(item_a) is False
        assert catalog.list() == before
        assert storage.load("catalog") == stored

    def test_is_persisted(self, catalog, storage):
        changed = replace(catalog.list()[0], name="MacBook Pro 16 (2023)")
        catalog.update(changed)

        reopened = CatalogStore(storage)
        reopened.initialize()
        assert reopened.list()[0].name == "MacBook Pro 16 (2023)"


class TestDelete:
    def test_removes_item(self, catalog):
        assert catalog.delete("3") is True
        assert catalog.get("3") is None
        assert len(catalog.list()) == 7

    def test_delete_twice_is_idempotent(self, catalog):
        catalog.delete("3")
        after_first = catalog.list()

        assert catalog.delete("3") is False
        assert catalog.list() == after_first

    def test_is_persisted(self, catalog, storage):
        catalog.delete("3")

        reopened = CatalogStore(storage)
        reopened.initialize()
        assert reopened.get("3") is None


class TestView:
    def test_no_query_yet_is_none(self, catalog):
        assert catalog.last_view is None

    def test_empty_result_differs_from_no_query(self, catalog):
        result = catalog.view(QuerySpec(term="chromebook"))

        assert result == []
        assert catalog.last_view == []
        assert catalog.last_view is not None

    def test_view_sees_mutations(self, catalog):
        spec = QuerySpec(sort=SORT_PRICE_ASC)
        assert catalog.view(spec)[0].id == "7"

        catalog.create(_new_laptop(price=10.0))
        assert catalog.view(spec)[0].price == 10.0

        catalog.delete(catalog.view(spec)[0].id)
        assert catalog.view(spec)[0].id == "7"

    def test_returned_list_is_a_copy(self, catalog):
        spec = QuerySpec()
        catalog.view(spec).clear()
        assert len(catalog.view(spec)) == 8
