"""
Legacy Key-Value Store.

The flat, synchronous storage used before the document store: one JSON
object of string keys to string values, kept in a single file. Notes are
a JSON-serialized array under "notes"; "theme" and "language" hold plain
strings.

Only read and erased by the legacy migration; nothing new is written here.
"""

import json
import os
import tempfile
from pathlib import Path

from notemaster.core.exceptions import LegacyStoreError
from notemaster.core.logging import get_logger

logger = get_logger(__name__)

NOTES_KEY = "notes"
THEME_KEY = "theme"
LANGUAGE_KEY = "language"


class LegacyStore:
    """
    File-backed flat key-value store.

    A missing file reads as an empty store. Every write replaces the file
    atomically.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise LegacyStoreError(f"Cannot read legacy store: {self._path}") from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise LegacyStoreError(f"Legacy store is not valid JSON: {self._path}") from e
        if not isinstance(data, dict):
            raise LegacyStoreError(f"Legacy store must hold an object: {self._path}")
        return data

    def _dump(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except OSError as e:
            raise LegacyStoreError(f"Cannot write legacy store: {self._path}") from e

    def get_item(self, key: str) -> str | None:
        """Return the value under key, or None when absent."""
        value = self._load().get(key)
        if value is None or isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        """Erase a key. Removing an absent key does nothing."""
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)
            logger.debug("Legacy key removed", extra={"key": key})

    def keys(self) -> list[str]:
        return list(self._load())
