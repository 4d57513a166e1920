# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""Tests for the bundled key-value backends."""

import asyncio
import json

import pytest

from swatchkeep.engine import create_entry
from swatchkeep.errors import PersistenceError
from swatchkeep.storage import HistoryStore, JsonFileStore, KeyValueStore, MemoryStore


def run(coro):
    return asyncio.run(coro)


class TestMemoryStore:

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStore(), KeyValueStore)

    def test_get_omits_absent_keys(self):
        store = MemoryStore({"a": 1})
        assert run(store.get(["a", "b"])) == {"a": 1}
        assert run(store.get("a")) == {"a": 1}

    def test_values_are_copies(self):
        store = MemoryStore()
        value = {"items": [1, 2]}
        run(store.set({"k": value}))
        value["items"].append(3)
        fetched = run(store.get("k"))["k"]
        assert fetched == {"items": [1, 2]}
        fetched["items"].clear()
        assert store.snapshot() == {"k": {"items": [1, 2]}}

    def test_remove_absent_is_noop(self):
        store = MemoryStore({"a": 1})
        run(store.remove(["a", "missing"]))
        assert store.snapshot() == {}

    def test_rejects_unserializable(self):
        with pytest.raises(TypeError):
            run(MemoryStore().set({"k": object()}))


class TestJsonFileStore:

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(JsonFileStore(tmp_path / "store.json"), KeyValueStore)

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "store.json")
        assert run(store.get(["a"])) == {}

    def test_set_then_get(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        store = JsonFileStore(path)
        run(store.set({"a": [1, 2], "b": "x"}))
        run(store.set({"c": True}))
        assert run(store.get(["a", "b", "c"])) == {"a": [1, 2], "b": "x", "c": True}
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": [1, 2], "b": "x", "c": True}

    def test_no_temp_file_left(self, tmp_path):
        store = JsonFileStore(tmp_path / "store.json")
        run(store.set({"a": 1}))
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_remove(self, tmp_path):
        store = JsonFileStore(tmp_path / "store.json")
        run(store.set({"a": 1, "b": 2}))
        run(store.remove("a"))
        assert run(store.get(["a", "b"])) == {"b": 2}

    def test_remove_missing_file_does_not_create_it(self, tmp_path):
        path = tmp_path / "store.json"
        run(JsonFileStore(path).remove("a"))
        assert not path.exists()

    def test_unserializable_leaves_file_untouched(self, tmp_path):
        path = tmp_path / "store.json"
        store = JsonFileStore(path)
        run(store.set({"a": 1}))
        with pytest.raises(TypeError):
            run(store.set({"b": object()}))
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": 1}

    def test_non_object_file_rejected(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ValueError):
            run(JsonFileStore(path).get("a"))


class TestHistoryOverJsonFile:

    def test_history_survives_new_store(self, tmp_path):
        path = tmp_path / "history.json"
        entry = create_entry("#3366cc", "oklch")
        run(HistoryStore(JsonFileStore(path)).add_entry(entry))
        assert run(HistoryStore(JsonFileStore(path)).get_history()) == [entry]

    def test_corrupt_file_is_persistence_error(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text('"not an object"', encoding="utf-8")
        with pytest.raises(PersistenceError) as excinfo:
            run(HistoryStore(JsonFileStore(path)).get_history())
        assert excinfo.value.operation == "get"
        assert isinstance(excinfo.value.__cause__, ValueError)
