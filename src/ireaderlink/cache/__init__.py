# ABOUTME: Public API for the ireaderlink lookup cache.
# ABOUTME: Exports the outcome cache, key/value stores, and connection management.

from ireaderlink.cache.connection import DEFAULT_CACHE_PATH, open_cache_db
from ireaderlink.cache.outcome_cache import (
    CACHE_TTL_MS,
    CACHE_VERSION,
    OutcomeCache,
    open_outcome_cache,
)
from ireaderlink.cache.store import (
    KeyValueStore,
    MemoryKeyValueStore,
    SqliteKeyValueStore,
    StorageFullError,
    StoreError,
    StoreWriteError,
)

__all__ = [
    "CACHE_TTL_MS",
    "CACHE_VERSION",
    "DEFAULT_CACHE_PATH",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "OutcomeCache",
    "SqliteKeyValueStore",
    "StorageFullError",
    "StoreError",
    "StoreWriteError",
    "open_cache_db",
    "open_outcome_cache",
]
