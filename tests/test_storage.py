"""
Tests for the key-value store backends.

The JSON file store only ever touches files under pytest's tmp_path.
"""

import json

import pytest

from split_calculator.registry import DEFAULT_STORAGE_KEY, SplitRegistry
from split_calculator.services.storage import (
    InMemoryStore,
    JsonFileStore,
    StorageReadError,
    StorageWriteError,
)


class TestInMemoryStore:
    """Tests for InMemoryStore."""

    def test_get_missing_key(self):
        """Test that a missing key reads as None."""
        assert InMemoryStore().get_item("absent") is None

    def test_set_get_remove(self):
        """Test the basic operations."""
        store = InMemoryStore()
        store.set_item("k", "v")
        assert store.get_item("k") == "v"
        assert "k" in store
        store.remove_item("k")
        assert store.get_item("k") is None
        store.remove_item("k")

    def test_initial_contents_are_copied(self):
        """Test that the seed dict is not shared."""
        seed = {"k": "v"}
        store = InMemoryStore(seed)
        store.set_item("k", "changed")
        assert seed == {"k": "v"}


class TestJsonFileStore:
    """Tests for JsonFileStore."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test reading before anything was written."""
        store = JsonFileStore(tmp_path / "store.json")
        assert store.get_item("k") is None

    def test_blank_file_is_empty(self, tmp_path):
        """Test a zero-length file."""
        path = tmp_path / "store.json"
        path.write_text("   ", encoding="utf-8")
        assert JsonFileStore(path).get_item("k") is None

    def test_write_creates_parent_directories(self, tmp_path):
        """Test first write into a fresh directory."""
        path = tmp_path / "nested" / "dir" / "store.json"
        store = JsonFileStore(path)
        store.set_item("k", "v")
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_values_survive_a_new_instance(self, tmp_path):
        """Test durability across sessions."""
        path = tmp_path / "store.json"
        JsonFileStore(path).set_item("a", "1")
        JsonFileStore(path).set_item("b", "2")
        store = JsonFileStore(path)
        assert store.get_item("a") == "1"
        assert store.get_item("b") == "2"

    def test_remove_item(self, tmp_path):
        """Test removing a key leaves the others."""
        path = tmp_path / "store.json"
        store = JsonFileStore(path)
        store.set_item("a", "1")
        store.set_item("b", "2")
        store.remove_item("a")
        store.remove_item("missing")
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    def test_no_temporary_files_left_behind(self, tmp_path):
        """Test that the atomic write cleans up."""
        store = JsonFileStore(tmp_path / "store.json")
        store.set_item("k", "v")
        store.set_item("k", "w")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"k": 5}'])
    def test_unreadable_file_raises_on_read(self, tmp_path, content):
        """Test corrupt or wrongly shaped files."""
        path = tmp_path / "store.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(StorageReadError):
            JsonFileStore(path).get_item("k")

    def test_invalid_utf8_raises_on_read(self, tmp_path):
        """Test a file whose bytes are not UTF-8."""
        path = tmp_path / "store.json"
        path.write_bytes(b'{"k": "\xff\xfe"}')
        store = JsonFileStore(path)
        with pytest.raises(StorageReadError):
            store.get_item("k")
        with pytest.raises(StorageWriteError):
            store.set_item("k", "v")

    def test_unreadable_file_is_not_overwritten(self, tmp_path):
        """Test that writes refuse to clobber a corrupt file."""
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path)

        with pytest.raises(StorageWriteError):
            store.set_item("k", "v")
        with pytest.raises(StorageWriteError):
            store.remove_item("k")

        assert path.read_text(encoding="utf-8") == "{not json"

    def test_write_failure_when_path_is_a_directory(self, tmp_path):
        """Test an unwritable target."""
        path = tmp_path / "store.json"
        path.mkdir()
        with pytest.raises((StorageReadError, StorageWriteError)):
            JsonFileStore(path).set_item("k", "v")


class TestRegistryOnJsonFile:
    """Tests for the registry persisting to a real file."""

    def test_saved_splits_survive_restart(self, tmp_path):
        """Test that a second session sees the first session's changes."""
        path = tmp_path / "store.json"
        first = SplitRegistry(store=JsonFileStore(path))
        first.load()
        first.add("60-40", [60, 40])

        second = SplitRegistry(store=JsonFileStore(path))
        second.load()
        assert second.names == ["50-50", "50-40-10", "60-40"]

    def test_file_holds_serialized_string(self, tmp_path):
        """Test the on-disk layout: one key, value is a JSON string."""
        path = tmp_path / "store.json"
        registry = SplitRegistry(store=JsonFileStore(path))
        registry.load()

        data = json.loads(path.read_text(encoding="utf-8"))
        assert list(data) == [DEFAULT_STORAGE_KEY]
        assert json.loads(data[DEFAULT_STORAGE_KEY]) == [
            {"name": "50-50", "value": [50, 50]},
            {"name": "50-40-10", "value": [50, 40, 10]},
        ]

    def test_corrupt_file_degrades_to_session_only(self, tmp_path):
        """Test a registry over an unreadable file."""
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        registry = SplitRegistry(store=JsonFileStore(path))
        registry.load()

        assert registry.names == ["50-50", "50-40-10"]
        assert isinstance(registry.storage_error, StorageReadError)

        registry.add("60-40", [60, 40])
        assert "60-40" in registry
        assert isinstance(registry.storage_error, StorageWriteError)
        assert path.read_text(encoding="utf-8") == "{not json"

    def test_non_utf8_file_degrades_to_session_only(self, tmp_path):
        """Test a registry over a file with undecodable bytes."""
        path = tmp_path / "store.json"
        path.write_bytes(b'{"' + DEFAULT_STORAGE_KEY.encode() + b'": "\xff\xfe"}')
        registry = SplitRegistry(store=JsonFileStore(path))
        registry.load()

        assert registry.names == ["50-50", "50-40-10"]
        assert isinstance(registry.storage_error, StorageReadError)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
