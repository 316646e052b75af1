# ABOUTME: The `ireaderlink page` command for checking books on a saved Douban page.
# ABOUTME: Extracts queries from a wishlist or subject page and resolves them.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

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
from ireaderlink.core.sources import (
    PageKind,
    detect_page_kind,
    queries_from_list_page,
    query_from_detail_page,
)
from ireaderlink.matching.types import Query


def _extract(html: str, kind: PageKind | None) -> list[Query]:
    """Queries for a page; without a known kind, try list layout then detail."""
    if kind is PageKind.LIST:
        return queries_from_list_page(html)
    if kind is PageKind.DETAIL:
        query = query_from_detail_page(html)
        return [query] if query else []

    queries = queries_from_list_page(html)
    if queries:
        return queries
    query = query_from_detail_page(html)
    return [query] if query else []


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--url",
    default=None,
    help="Original page URL, used to tell list pages from subject pages.",
)
@cache_option
@no_cache_option
@timeout_option
@concurrency_option
@retry_option
def page(
    path: Path,
    url: str | None,
    cache_path: Path | None,
    no_cache: bool,
    timeout: float,
    concurrency: int,
    retry: bool,
) -> None:
    """Check the books on a saved Douban Books page (PATH) against iReader."""
    console = Console()
    kind = detect_page_kind(url) if url else None
    if url and kind is None:
        console.print(f"[yellow]Not a Douban wishlist or subject URL:[/yellow] {escape(url)}")
        raise SystemExit(1)

    queries = _extract(path.read_text(encoding="utf-8"), kind)
    if not queries:
        console.print("[yellow]No books found on page.[/yellow]")
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
