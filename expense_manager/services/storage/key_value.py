"""
Key-Value Store Implementations

JsonFileKeyValueStore keeps every key in a single JSON object on disk,
the same shape as a browser's local storage: string keys, string values.

TRADEOFFS:
- The whole file is rewritten on every set (fine for one user's data)
- Writes go to a temporary file that is renamed over the original, so a
  crash never leaves a half-written store
"""

import json
import os
from pathlib import Path
from typing import Mapping, Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_manager.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    StorageError,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        """Copy of the current contents."""
        return dict(self._data)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Store backed by one JSON file.

    File I/O is retried on OSError (e.g. a file briefly locked by a
    backup tool) before surfacing as StorageError.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: Mapping[str, str]) -> None:
        data = self._read()
        data.update(items)
        try:
            self._write_text(json.dumps(data, indent=2, sort_keys=True))
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def _read(self) -> dict[str, str]:
        try:
            text = self._read_text()
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e

        if text is None or not text.strip():
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, dict) or not all(
            isinstance(value, str) for value in data.values()
        ):
            raise CorruptDataError(
                f"{self._path} must hold a JSON object of string values"
            )
        return data

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        reraise=True,
    )
    def _read_text(self) -> Optional[str]:
        if not self._path.exists():
            return None
        return self._path.read_text(encoding="utf-8")

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        reraise=True,
    )
    def _write_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, self._path)
