# ABOUTME: The `ireaderlink lookup` command for checking a single book.
# ABOUTME: Resolves one title/author against iReader and shows the outcome.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ireaderlink.cli.options import cache_option, no_cache_option, retry_option, timeout_option
from ireaderlink.cli.render import describe_outcome
from ireaderlink.cli.session import open_cache, run_lookups
from ireaderlink.core.orchestrator import LookupState
from ireaderlink.matching.types import Found, Query, Uncertain


@click.command()
@click.argument("title")
@click.option("-a", "--author", default=None, help="Author, used to tell same-titled books apart.")
@cache_option
@no_cache_option
@timeout_option
@retry_option
def lookup(
    title: str,
    author: str | None,
    cache_path: Path | None,
    no_cache: bool,
    timeout: float,
    retry: bool,
) -> None:
    """Check whether iReader carries a book."""
    console = Console()
    try:
        query = Query(title=title, author=author)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="TITLE") from exc

    with open_cache(cache_path, no_cache=no_cache) as cache:
        [result] = run_lookups(
            [query],
            cache=cache,
            timeout=timeout,
            concurrency=1,
            retry=retry,
            console=console,
        )

    table = Table(title=escape(query.title), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("Author", escape(query.author) if query.author else "[dim]unknown[/dim]")
    table.add_row("iReader", describe_outcome(result.outcome, result.state))
    if isinstance(result.outcome, Found):
        table.add_row("Book", escape(result.outcome.title))
        table.add_row("URL", escape(result.outcome.url))
    elif isinstance(result.outcome, Uncertain):
        table.add_row("Search", escape(result.outcome.search_url))
    elif result.error is not None:
        table.add_row("Error", f"[red]{escape(str(result.error))}[/red]")
    console.print(table)

    if result.state is LookupState.ERROR:
        raise SystemExit(1)
