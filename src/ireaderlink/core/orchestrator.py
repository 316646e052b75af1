# ABOUTME: Drives storefront lookups end to end: cache, fetch, parse, cache write.
# ABOUTME: Tracks per-query state, runs bounded-concurrency batches, and exposes manual retry.

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ireaderlink.cache.outcome_cache import OutcomeCache
from ireaderlink.matching.http import SearchClient, SearchFetchError
from ireaderlink.matching.parser import parse_search_result
from ireaderlink.matching.types import MatchOutcome, Query

logger = logging.getLogger(__name__)

# Peak number of in-flight storefront requests during a batch.
BATCH_SIZE = 3

T = TypeVar("T")


class LookupState(enum.Enum):
    """Lifecycle of a single query: IDLE -> LOADING -> SUCCESS | ERROR."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


LookupListener = Callable[[Query, LookupState, MatchOutcome | None], None]


@dataclass
class LookupResult:
    """Final state of one lookup, handed to the rendering layer.

    On ERROR, `retry` re-runs the lookup with a fresh fetch; it is None
    otherwise.
    """

    query: Query
    state: LookupState
    outcome: MatchOutcome | None = None
    error: SearchFetchError | None = None
    retry: Callable[[], Awaitable["LookupResult"]] | None = None

    @property
    def ok(self) -> bool:
        return self.state is LookupState.SUCCESS


def chunked(items: list[T], size: int) -> list[list[T]]:
    """Split items into consecutive chunks of at most size elements."""
    return [items[i : i + size] for i in range(0, len(items), size)]


class LookupOrchestrator:
    """Resolves queries against the storefront through the outcome cache.

    Uses a dependency-injected SearchClient and OutcomeCache. Every state
    transition is reported to the optional listener as
    (query, state, outcome), which is how results reach the presentation
    layer.
    """

    def __init__(
        self,
        client: SearchClient,
        cache: OutcomeCache,
        *,
        listener: LookupListener | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._listener = listener
        self._states: dict[Query, LookupState] = {}

    def state_of(self, query: Query) -> LookupState:
        """Last state reported for a query; IDLE if it was never looked up."""
        return self._states.get(query, LookupState.IDLE)

    def _transition(
        self, query: Query, state: LookupState, outcome: MatchOutcome | None = None
    ) -> None:
        self._states[query] = state
        if self._listener is not None:
            self._listener(query, state, outcome)

    async def resolve(self, query: Query) -> MatchOutcome:
        """Resolve one query to an outcome.

        A cache hit returns immediately without entering LOADING. On a miss
        the storefront is searched and the outcome written through to the
        cache.

        Raises:
            SearchFetchError: If the search request fails. The query is left
                in ERROR and nothing is cached.
        """
        cached = self._cache.get(query.title)
        if cached is not None:
            logger.debug("%r served from cache", query.title)
            self._transition(query, LookupState.SUCCESS, cached)
            return cached

        self._transition(query, LookupState.LOADING)
        try:
            payload = await self._client.fetch(query.title)
        except SearchFetchError as exc:
            logger.error("Search for %r failed: %s", query.title, exc)
            self._transition(query, LookupState.ERROR)
            raise

        outcome = parse_search_result(payload, query)
        self._cache.set(query.title, outcome)
        self._transition(query, LookupState.SUCCESS, outcome)
        return outcome

    async def lookup(self, query: Query) -> LookupResult:
        """Resolve one query, capturing fetch failures in the result."""
        try:
            outcome = await self.resolve(query)
        except SearchFetchError as exc:
            return LookupResult(
                query=query,
                state=LookupState.ERROR,
                error=exc,
                retry=lambda: self.retry(query),
            )
        return LookupResult(query=query, state=LookupState.SUCCESS, outcome=outcome)

    async def retry(self, query: Query) -> LookupResult:
        """Manually re-run a lookup; issues a brand-new fetch on a cache miss."""
        logger.info("Retrying %r", query.title)
        return await self.lookup(query)

    async def resolve_batch(
        self, queries: list[Query], concurrency_limit: int = BATCH_SIZE
    ) -> list[LookupResult]:
        """Resolve many queries, at most concurrency_limit at a time.

        Queries are processed in fixed chunks: every lookup in a chunk runs
        concurrently, and the next chunk starts only after the whole chunk
        has settled. A failed lookup never stops its siblings or later
        chunks. Repeated queries are looked up once and share a result.
        Results are returned in input order.
        """
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be at least 1, got {concurrency_limit}")

        unique = list(dict.fromkeys(queries))
        resolved: dict[Query, LookupResult] = {}
        for chunk in chunked(unique, concurrency_limit):
            for result in await asyncio.gather(*(self.lookup(q) for q in chunk)):
                resolved[result.query] = result

        results = [resolved[q] for q in queries]
        failed = sum(1 for r in results if not r.ok)
        logger.info("Batch finished: %d ok, %d failed", len(results) - failed, failed)
        return results
