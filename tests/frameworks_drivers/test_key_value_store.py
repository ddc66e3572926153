import json

import pytest

from ollama_console.frameworks_drivers.key_value_store import InMemoryKeyValueStore, JsonFileKeyValueStore
from ollama_console.shared.errors import StorageError


class TestInMemoryKeyValueStore:
    def test_get_set(self):
        store = InMemoryKeyValueStore({"a": "1"})

        store.set("b", "2")

        assert store.get("a") == "1"
        assert store.get("b") == "2"
        assert store.get("missing") is None


class TestJsonFileKeyValueStore:
    def test_missing_file_reads_as_empty(self, tmp_path):
        assert JsonFileKeyValueStore(str(tmp_path / "state.json")).get("serverUrl") is None

    def test_values_survive_a_new_instance(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        JsonFileKeyValueStore(str(path)).set("serverUrl", "http://gpu-box:11434")

        assert JsonFileKeyValueStore(str(path)).get("serverUrl") == "http://gpu-box:11434"
        assert json.loads(path.read_text()) == {"serverUrl": "http://gpu-box:11434"}

    def test_no_temporary_files_left_behind(self, tmp_path):
        store = JsonFileKeyValueStore(str(tmp_path / "state.json"))

        store.set("a", "1")
        store.set("b", "2")

        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_corrupt_file_raises_and_is_not_overwritten(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{broken")
        store = JsonFileKeyValueStore(str(path))

        with pytest.raises(StorageError):
            store.get("a")
        with pytest.raises(StorageError):
            store.set("a", "1")

        assert path.read_text() == "{broken"

    def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[]")

        with pytest.raises(StorageError):
            JsonFileKeyValueStore(str(path)).get("a")
