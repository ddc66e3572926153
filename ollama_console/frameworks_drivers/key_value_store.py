import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional

from ollama_console.shared.errors import StorageError
from ollama_console.shared.protocols import KeyValueStoreProtocol

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore(KeyValueStoreProtocol):
    """Process-local store, used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore(KeyValueStoreProtocol):
    """
    String values kept in one JSON object on disk.

    Every write replaces the whole file through a temporary sibling, so a failed
    write leaves the previous contents intact.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_name, self.path)
            except OSError as e:
                Path(tmp_name).unlink(missing_ok=True)
                raise StorageError(f"Could not write {self.path}: {e}") from e
        logger.debug(f"Stored {key} in {self.path}")
