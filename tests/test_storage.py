"""Tests for ethereal.storage."""

import pytest

from ethereal.storage import MemoryStorage, SQLiteStorage


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStorage()
    return SQLiteStorage(tmp_path / "store.db")


class TestKeyValueStore:
    def test_missing_key_is_none(self, store):
        assert store.get_item("nope") is None

    def test_set_then_get(self, store):
        store.set_item("k", "v")
        assert store.get_item("k") == "v"

    def test_set_overwrites(self, store):
        store.set_item("k", "one")
        store.set_item("k", "two")
        assert store.get_item("k") == "two"

    def test_remove(self, store):
        store.set_item("k", "v")
        store.remove_item("k")
        assert store.get_item("k") is None

    def test_remove_missing_is_noop(self, store):
        store.remove_item("nope")
        assert store.keys() == []

    def test_keys_and_clear(self, store):
        store.set_item("b", "2")
        store.set_item("a", "1")
        assert store.keys() == ["a", "b"]
        store.clear()
        assert store.keys() == []


class TestSQLiteStorage:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "store.db"
        SQLiteStorage(path).set_item("thoughts", "[]")
        assert SQLiteStorage(path).get_item("thoughts") == "[]"

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "a" / "b" / "store.db"
        SQLiteStorage(path)
        assert path.exists()

    def test_default_path_uses_ethereal_home(self, tmp_path):
        store = SQLiteStorage()
        assert store.db_path == tmp_path / "home" / "ethereal.db"

    def test_unicode_values(self, tmp_path):
        store = SQLiteStorage(tmp_path / "store.db")
        store.set_item("k", "灵感 ✨")
        assert store.get_item("k") == "灵感 ✨"


class TestMemoryStorage:
    def test_initial_items_are_copied(self):
        initial = {"k": "v"}
        store = MemoryStorage(initial)
        store.set_item("k", "changed")
        assert initial["k"] == "v"
