# ABOUTME: Wires the HTTP client, outcome cache, and orchestrator for CLI commands.
# ABOUTME: Runs a batch with a Rich progress bar and prompts to retry failed lookups.

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from ireaderlink.cache.connection import DEFAULT_CACHE_PATH, open_cache_db
from ireaderlink.cache.outcome_cache import OutcomeCache, open_outcome_cache
from ireaderlink.cache.store import MemoryKeyValueStore, SqliteKeyValueStore
from ireaderlink.core.orchestrator import (
    LookupOrchestrator,
    LookupResult,
    LookupState,
    chunked,
)
from ireaderlink.matching.http import IReaderHttpClient
from ireaderlink.matching.types import MatchOutcome, Query


def _create_client(timeout: float) -> IReaderHttpClient:
    """Create the default storefront search client."""
    return IReaderHttpClient(timeout=timeout)


@contextmanager
def open_cache(cache_path: Path | None, *, no_cache: bool = False) -> Iterator[OutcomeCache]:
    """Yield a version-checked OutcomeCache, closing the database afterwards."""
    if no_cache:
        yield open_outcome_cache(MemoryKeyValueStore())
        return

    conn = open_cache_db(cache_path or DEFAULT_CACHE_PATH)
    try:
        yield open_outcome_cache(SqliteKeyValueStore(conn))
    finally:
        conn.close()


def _make_progress(console: Console) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    )


async def _retry_failed(
    results: list[LookupResult], concurrency: int
) -> list[LookupResult]:
    """Re-run every failed lookup once, chunked like a batch, keeping positions."""
    failed: dict[Query, LookupResult] = {}
    for result in results:
        if result.retry is not None:
            failed.setdefault(result.query, result)

    retried: dict[Query, LookupResult] = {}
    for chunk in chunked(list(failed.values()), concurrency):
        for result in await asyncio.gather(*(r.retry() for r in chunk)):
            retried[result.query] = result
    return [retried.get(r.query, r) if r.retry is not None else r for r in results]


async def _run(
    queries: list[Query],
    *,
    cache: OutcomeCache,
    timeout: float,
    concurrency: int,
    retry: bool,
    console: Console,
) -> list[LookupResult]:
    progress = _make_progress(console)
    task_id = progress.add_task("Searching iReader", total=len(set(queries)))

    def on_transition(query: Query, state: LookupState, outcome: MatchOutcome | None) -> None:
        if state is LookupState.LOADING:
            progress.update(task_id, description=escape(query.title))
        elif state in (LookupState.SUCCESS, LookupState.ERROR):
            progress.advance(task_id)

    async with _create_client(timeout) as client:
        orchestrator = LookupOrchestrator(client, cache, listener=on_transition)
        with progress:
            results = await orchestrator.resolve_batch(queries, concurrency)

        while retry:
            failed = len({r.query for r in results if r.state is LookupState.ERROR})
            if not failed or not click.confirm(
                f"{failed} lookup(s) failed. Retry?", default=True
            ):
                break
            progress = _make_progress(console)
            task_id = progress.add_task("Retrying", total=failed)
            with progress:
                results = await _retry_failed(results, concurrency)

    return results


def run_lookups(
    queries: list[Query],
    *,
    cache: OutcomeCache,
    timeout: float,
    concurrency: int,
    retry: bool,
    console: Console,
) -> list[LookupResult]:
    """Resolve queries in bounded batches, prompting to retry failures if asked."""
    return asyncio.run(
        _run(
            queries,
            cache=cache,
            timeout=timeout,
            concurrency=concurrency,
            retry=retry,
            console=console,
        )
    )
