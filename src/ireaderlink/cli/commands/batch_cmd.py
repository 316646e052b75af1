# ABOUTME: The `ireaderlink batch` command for checking a list of books.
# ABOUTME: Reads title[TAB author] lines and resolves them in bounded batches.

from pathlib import Path

import click
from rich.console import Console

from ireaderlink.cli.options import (
    cache_option,
    concurrency_option,
    no_cache_option,
    retry_option,
    timeout_option,
)
from ireaderlink.cli.render import render_results
from ireaderlink.cli.session import open_cache, run_lookups
from ireaderlink.core.orchestrator import LookupState
from ireaderlink.matching.types import Query


def read_queries(path: Path) -> list[Query]:
    """Parse a book list file: one `title` or `title<TAB>author` per line.

    Blank lines and lines starting with '#' are ignored.
    """
    queries: list[Query] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        title, _, author = line.partition("\t")
        if not title.strip():
            continue
        queries.append(Query(title=title, author=author or None))
    return queries


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@cache_option
@no_cache_option
@timeout_option
@concurrency_option
@retry_option
def batch(
    path: Path,
    cache_path: Path | None,
    no_cache: bool,
    timeout: float,
    concurrency: int,
    retry: bool,
) -> None:
    """Check every book listed in PATH against iReader."""
    console = Console()
    queries = read_queries(path)
    if not queries:
        console.print("[yellow]No books found in file.[/yellow]")
        return

    with open_cache(cache_path, no_cache=no_cache) as cache:
        results = run_lookups(
            queries,
            cache=cache,
            timeout=timeout,
            concurrency=concurrency,
            retry=retry,
            console=console,
        )

    render_results(console, results)
    if any(r.state is LookupState.ERROR for r in results):
        raise SystemExit(1)
