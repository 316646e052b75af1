# ABOUTME: Key/value store abstraction backing the lookup cache.
# ABOUTME: KeyValueStore protocol with SQLite-backed and in-memory implementations.

import logging
import sqlite3
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the underlying store cannot complete an operation."""


class StoreWriteError(StoreError):
    """Raised when a write or delete could not be applied."""


class StorageFullError(StoreWriteError):
    """Raised when the store has no room for a write."""


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for a flat string-to-string store with prefix listing."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self, prefix: str = "") -> list[str]: ...


class SqliteKeyValueStore:
    """KeyValueStore over the kv_entries table of a cache database.

    SQLite failures surface as StoreError subclasses.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def _rollback(self) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error as exc:
            logger.debug("Rollback failed: %s", exc)

    def get(self, key: str) -> str | None:
        try:
            cursor = self._conn.execute("SELECT value FROM kv_entries WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot read {key!r}: {exc}") from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Insert or replace a value.

        Raises:
            StorageFullError: If SQLite reports the database or disk is full.
            StoreWriteError: On any other SQLite failure.
        """
        try:
            self._conn.execute(
                "INSERT OR REPLACE INTO kv_entries (key, value) VALUES (?, ?)",
                (key, value),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            self._rollback()
            if "full" in str(exc).lower():
                raise StorageFullError(f"Cannot store {key!r}: {exc}") from exc
            raise StoreWriteError(f"Cannot store {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
            self._conn.commit()
        except sqlite3.Error as exc:
            self._rollback()
            raise StoreWriteError(f"Cannot delete {key!r}: {exc}") from exc

    def keys(self, prefix: str = "") -> list[str]:
        """List keys starting with prefix, in key order."""
        try:
            cursor = self._conn.execute(
                "SELECT key FROM kv_entries WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            )
            return [row[0] for row in cursor.fetchall()]
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot list keys under {prefix!r}: {exc}") from exc

    def close(self) -> None:
        self._conn.close()


class MemoryKeyValueStore:
    """In-process KeyValueStore, optionally capped at max_entries keys.

    Useful for one-off runs that should not touch disk, and for exercising
    the cache's storage-full handling.
    """

    def __init__(self, *, max_entries: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._max_entries = max_entries

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if (
            self._max_entries is not None
            and key not in self._data
            and len(self._data) >= self._max_entries
        ):
            raise StorageFullError(f"Cannot store {key!r}: {self._max_entries} entries in use")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    def __len__(self) -> int:
        return len(self._data)
