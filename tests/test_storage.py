import json

import pytest

from laundry.domain.errors import CorruptCollectionError
from laundry.storage.json_kv_store import JsonFileKeyValueStore
from laundry.storage.kv_store import MemoryKeyValueStore
from laundry.storage.record_store import (
    CURRENT_USER,
    ORDERS,
    PACKAGES,
    TRANSACTIONS,
    USERS,
    RecordStore,
)


class TestMemoryKeyValueStore:
    def test_missing_key_reads_none(self):
        store = MemoryKeyValueStore()
        assert store.get_item("users") is None

    def test_set_get_remove(self):
        store = MemoryKeyValueStore()
        store.set_item("users", "[]")
        assert store.get_item("users") == "[]"
        store.remove_item("users")
        assert store.get_item("users") is None

    def test_remove_absent_key_is_noop(self):
        store = MemoryKeyValueStore()
        store.remove_item("nothing")
        assert list(store.keys()) == []

    def test_instances_are_isolated(self):
        first = MemoryKeyValueStore()
        second = MemoryKeyValueStore()
        first.set_item("orders", "[]")
        assert second.get_item("orders") is None


class TestJsonFileKeyValueStore:
    def test_creates_data_dir(self, tmp_path):
        data_dir = tmp_path / "nested" / "data"
        JsonFileKeyValueStore(data_dir)
        assert data_dir.is_dir()

    def test_values_live_in_one_file_per_key(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path)
        store.set_item("packages", '[{"id": "1"}]')

        assert (tmp_path / "packages.json").read_text(encoding="utf-8") == '[{"id": "1"}]'
        assert store.get_item("packages") == '[{"id": "1"}]'
        assert list(store.keys()) == ["packages"]

    def test_values_survive_a_new_instance(self, tmp_path):
        JsonFileKeyValueStore(tmp_path).set_item("orders", "[]")
        assert JsonFileKeyValueStore(tmp_path).get_item("orders") == "[]"

    def test_remove_item(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path)
        store.set_item(CURRENT_USER, "{}")
        store.remove_item(CURRENT_USER)
        store.remove_item(CURRENT_USER)
        assert store.get_item(CURRENT_USER) is None

    @pytest.mark.parametrize("key", ["", "../escape", ".hidden", "a/b"])
    def test_rejects_keys_that_are_not_plain_names(self, tmp_path, key):
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(ValueError):
            store.set_item(key, "[]")


class TestRecordStore:
    def test_initialize_seeds_every_collection(self, kv_store, clock):
        records = RecordStore(kv_store, clock=clock)
        records.initialize()

        users = records.read_collection(USERS)
        assert len(users) == 1
        assert users[0]["username"] == "umar"
        assert users[0]["password"] == "umar123"
        assert users[0]["role"] == "admin"
        assert [p["name"] for p in records.read_collection(PACKAGES)] == [
            "Cuci Kering",
            "Cuci Setrika",
            "Setrika Saja",
            "Cuci Lipat",
        ]
        assert [p["price"] for p in records.read_collection(PACKAGES)] == [7000, 10000, 5000, 8000]
        assert records.read_collection(ORDERS) == []
        assert records.read_collection(TRANSACTIONS) == []

    def test_initialize_never_overwrites_existing_data(self, kv_store, clock):
        kv_store.set_item(PACKAGES, json.dumps([{"id": "9", "name": "Karpet", "price": 15000, "description": ""}]))
        records = RecordStore(kv_store, clock=clock)
        records.initialize()
        records.initialize()

        packages = records.read_collection(PACKAGES)
        assert [p["id"] for p in packages] == ["9"]
        assert len(records.read_collection(USERS)) == 1

    def test_seeded_user_uses_stored_field_names(self, record_store):
        user = record_store.read_collection(USERS)[0]
        assert "joinDate" in user
        assert "join_date" not in user

    def test_missing_or_empty_collection_reads_empty(self, kv_store):
        records = RecordStore(kv_store)
        assert records.read_collection(ORDERS) == []
        kv_store.set_item(ORDERS, "")
        assert records.read_collection(ORDERS) == []

    def test_malformed_collection_raises(self, kv_store):
        kv_store.set_item(ORDERS, "[{not json")
        with pytest.raises(CorruptCollectionError):
            RecordStore(kv_store).read_collection(ORDERS)

    def test_non_array_collection_raises(self, kv_store):
        kv_store.set_item(ORDERS, '{"id": "1"}')
        with pytest.raises(CorruptCollectionError) as excinfo:
            RecordStore(kv_store).read_collection(ORDERS)
        assert excinfo.value.name == ORDERS

    def test_write_collection_replaces_the_whole_blob(self, kv_store):
        records = RecordStore(kv_store)
        records.write_collection(ORDERS, [{"id": "a"}, {"id": "b"}])
        records.write_collection(ORDERS, [{"id": "c"}])
        assert records.read_collection(ORDERS) == [{"id": "c"}]

    def test_single_values(self, kv_store):
        records = RecordStore(kv_store)
        assert records.read_value(CURRENT_USER) is None
        records.write_value(CURRENT_USER, {"id": "1"})
        assert records.read_value(CURRENT_USER) == {"id": "1"}
        records.remove_value(CURRENT_USER)
        assert records.read_value(CURRENT_USER) is None
