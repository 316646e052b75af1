# ABOUTME: Expiring, version-gated cache of lookup outcomes keyed by original title.
# ABOUTME: Lazily evicts expired or corrupt entries; writes are best-effort and never fatal.

import logging
import time
from collections.abc import Callable

from ireaderlink.cache.mapping import CacheEntry, CorruptEntryError, entry_to_json, json_to_entry
from ireaderlink.cache.store import KeyValueStore, StoreError, StoreWriteError
from ireaderlink.matching.types import MatchOutcome

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "ireader_cache_"
CACHE_VERSION_KEY = "ireader_cache_version"
# Bump whenever matching logic changes so stale outcomes are dropped.
CACHE_VERSION = "v6"
CACHE_TTL_MS = 7 * 24 * 60 * 60 * 1000


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class OutcomeCache:
    """Cache of MatchOutcomes over a KeyValueStore namespace.

    Entries live under `prefix + title`, where title is the original,
    unnormalized query title. A separate version key gates wholesale
    invalidation; see ensure_version().
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        prefix: str = CACHE_KEY_PREFIX,
        version_key: str = CACHE_VERSION_KEY,
        version: str = CACHE_VERSION,
        ttl_ms: int = CACHE_TTL_MS,
        clock: Callable[[], int] = _epoch_millis,
    ) -> None:
        self._store = store
        self._prefix = prefix
        self._version_key = version_key
        self._version = version
        self._ttl_ms = ttl_ms
        self._clock = clock

    def _key(self, title: str) -> str | None:
        """Store key for a title, or None when it would collide with the version key."""
        key = self._prefix + title
        return None if key == self._version_key else key

    def _entry_keys(self) -> list[str]:
        # The version key may share the entry prefix; it is never an entry.
        return [k for k in self._store.keys(self._prefix) if k != self._version_key]

    def _is_expired(self, entry: CacheEntry, now: int) -> bool:
        return now - entry.stored_at_ms > self._ttl_ms

    def _evict(self, key: str) -> None:
        try:
            self._store.delete(key)
        except StoreError as exc:
            logger.warning("Could not evict cache entry %r: %s", key, exc)

    def get(self, title: str) -> MatchOutcome | None:
        """Return the cached outcome for a title, or None.

        Expired and corrupt entries are evicted and reported as misses. A
        store that cannot be read is logged and also reported as a miss.
        """
        key = self._key(title)
        if key is None:
            return None

        try:
            raw = self._store.get(key)
        except StoreError as exc:
            logger.warning("Cache read failed for %r: %s", title, exc)
            return None
        if raw is None:
            return None

        try:
            entry = json_to_entry(raw)
        except CorruptEntryError as exc:
            logger.debug("Evicting corrupt cache entry %r: %s", key, exc)
            self._evict(key)
            return None

        if self._is_expired(entry, self._clock()):
            logger.debug("Evicting expired cache entry %r", key)
            self._evict(key)
            return None

        return entry.outcome

    def set(self, title: str, outcome: MatchOutcome) -> None:
        """Store an outcome for a title, stamped with the current time.

        If the write fails, sweeps expired entries and retries once. A
        second failure is logged and the write is dropped. A title whose key
        would overwrite the version tag is never stored.
        """
        key = self._key(title)
        if key is None:
            logger.debug("Not caching %r: key is reserved for the version tag", title)
            return

        value = entry_to_json(CacheEntry(outcome=outcome, stored_at_ms=self._clock()))
        try:
            self._store.set(key, value)
            return
        except StoreWriteError as exc:
            logger.info("Sweeping cache before retrying write for %r: %s", title, exc)

        try:
            evicted = self.sweep_expired()
            logger.info("Swept %d stale entries", evicted)
        except StoreError as exc:
            logger.warning("Cache sweep failed: %s", exc)

        try:
            self._store.set(key, value)
        except StoreError as exc:
            logger.warning("Cache write failed for %r: %s", title, exc)

    def sweep_expired(self) -> int:
        """Evict every missing, corrupt, or expired entry. Returns the count evicted.

        Raises:
            StoreError: If the store cannot be read or an eviction fails.
        """
        now = self._clock()
        stale: list[str] = []
        for key in self._entry_keys():
            raw = self._store.get(key)
            if not raw:
                stale.append(key)
                continue
            try:
                entry = json_to_entry(raw)
            except CorruptEntryError:
                stale.append(key)
                continue
            if self._is_expired(entry, now):
                stale.append(key)

        for key in stale:
            self._store.delete(key)
        return len(stale)

    def clear(self) -> int:
        """Evict every entry regardless of age. Returns the count evicted."""
        keys = self._entry_keys()
        for key in keys:
            self._store.delete(key)
        return len(keys)

    def ensure_version(self) -> bool:
        """Purge the namespace if it was written by a different cache version.

        Returns True if a purge happened. Running it again without a version
        change is a no-op.
        """
        stored = self._store.get(self._version_key)
        if stored == self._version:
            return False

        evicted = self.clear()
        self._store.set(self._version_key, self._version)
        logger.info(
            "Cache version %s -> %s, evicted %d entries", stored, self._version, evicted
        )
        return True


def open_outcome_cache(store: KeyValueStore, **kwargs) -> OutcomeCache:
    """Build an OutcomeCache and run the version gate once."""
    cache = OutcomeCache(store, **kwargs)
    cache.ensure_version()
    return cache
