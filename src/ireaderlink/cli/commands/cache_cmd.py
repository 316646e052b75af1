# ABOUTME: The `ireaderlink cache` command group for cache maintenance.
# ABOUTME: Provides sweep (drop stale entries) and clear (drop everything).

from pathlib import Path

import click
from rich.console import Console

from ireaderlink.cli.options import cache_option
from ireaderlink.cli.session import open_cache


@click.group("cache")
def cache() -> None:
    """Maintain the lookup cache."""


@cache.command("sweep")
@cache_option
def cache_sweep(cache_path: Path | None) -> None:
    """Remove expired and corrupt cache entries."""
    console = Console()
    with open_cache(cache_path) as outcome_cache:
        evicted = outcome_cache.sweep_expired()
    console.print(f"[green]Removed {evicted} stale entr{'y' if evicted == 1 else 'ies'}.[/green]")


@cache.command("clear")
@cache_option
@click.confirmation_option(prompt="Remove every cached lookup?")
def cache_clear(cache_path: Path | None) -> None:
    """Remove every cached lookup."""
    console = Console()
    with open_cache(cache_path) as outcome_cache:
        evicted = outcome_cache.clear()
    console.print(f"[green]Removed {evicted} entr{'y' if evicted == 1 else 'ies'}.[/green]")
