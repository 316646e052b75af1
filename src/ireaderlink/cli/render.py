# ABOUTME: Rich rendering of lookup results for the terminal.
# ABOUTME: Turns LookupResults into status lines and a summary table.

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ireaderlink.core.orchestrator import LookupResult, LookupState
from ireaderlink.matching.types import Found, MatchOutcome, NotFound, Uncertain


def describe_outcome(outcome: MatchOutcome | None, state: LookupState) -> str:
    """One-line Rich markup for a lookup's state and outcome."""
    if state is LookupState.LOADING:
        return "[dim]searching iReader...[/dim]"
    if state is LookupState.ERROR:
        return "[red]request failed[/red]"
    if isinstance(outcome, Found):
        return "[green]✓ available[/green]"
    if isinstance(outcome, Uncertain):
        return "[yellow]? several possible matches[/yellow]"
    if isinstance(outcome, NotFound):
        return "[dim]✗ not available[/dim]"
    return "[dim]-[/dim]"


def _outcome_link(result: LookupResult) -> str:
    if isinstance(result.outcome, Found):
        return escape(result.outcome.url)
    if isinstance(result.outcome, Uncertain):
        return escape(result.outcome.search_url)
    if result.error is not None:
        return f"[red]{escape(str(result.error))}[/red]"
    return ""


def render_results(console: Console, results: list[LookupResult]) -> None:
    """Print a table of results followed by a count summary."""
    table = Table()
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("iReader")
    table.add_column("Link", overflow="fold")

    for i, result in enumerate(results, start=1):
        table.add_row(
            str(i),
            escape(result.query.title),
            escape(result.query.author) if result.query.author else "[dim]unknown[/dim]",
            describe_outcome(result.outcome, result.state),
            _outcome_link(result),
        )

    console.print(table)

    found = sum(1 for r in results if isinstance(r.outcome, Found))
    uncertain = sum(1 for r in results if isinstance(r.outcome, Uncertain))
    failed = sum(1 for r in results if r.state is LookupState.ERROR)
    parts = [f"[green]{found} available[/green]"]
    if uncertain:
        parts.append(f"[yellow]{uncertain} uncertain[/yellow]")
    if failed:
        parts.append(f"[red]{failed} failed[/red]")
    console.print(f"\n[dim]{len(results)} book(s):[/dim] {', '.join(parts)}")
