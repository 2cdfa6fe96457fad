"""
JSON File Storage Implementation

Keeps every key in one JSON object on disk:

    {"splittingCalculatorSplits": "[{\"name\": \"50-50\", \"value\": [50, 50]}]"}

Values are stored as strings, exactly as a browser's localStorage holds
them, so the registry's serialization does not depend on the backend.

Writes go to a temporary file in the same directory and are moved into
place with os.replace, so a crash mid-write leaves the previous file intact.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from split_calculator.services.storage.interface import (
    KeyValueStore,
    StorageReadError,
    StorageWriteError,
)


class JsonFileStore(KeyValueStore):
    """
    Key-value store backed by a single JSON file.
    
    A missing file is an empty store.
    """
    
    def __init__(self, path: Path):
        self._path = Path(path)
    
    @property
    def path(self) -> Path:
        return self._path
    
    def _read_all(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageReadError(f"Cannot read {self._path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StorageReadError(f"{self._path} is not valid UTF-8: {e}") from e
        
        if not text.strip():
            return {}
        
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"{self._path} is not valid JSON: {e}") from e
        
        if not isinstance(data, dict) or not all(
            isinstance(value, str) for value in data.values()
        ):
            raise StorageReadError(
                f"{self._path} does not hold a JSON object of strings"
            )
        return data
    
    def _write_all(self, items: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self._path}: {e}") from e
    
    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)
    
    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except StorageReadError as e:
            raise StorageWriteError(
                f"Refusing to overwrite unreadable store: {e}"
            ) from e
        items[key] = value
        self._write_all(items)
    
    def remove_item(self, key: str) -> None:
        try:
            items = self._read_all()
        except StorageReadError as e:
            raise StorageWriteError(
                f"Refusing to modify unreadable store: {e}"
            ) from e
        if key in items:
            del items[key]
            self._write_all(items)
