# ABOUTME: CLI package for ireaderlink, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from ireaderlink.cli.commands import batch_cmd, cache_cmd, lookup_cmd, page_cmd


def _configure_logging(verbosity: int) -> None:
    """WARNING by default, INFO for -v, DEBUG for -vv."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="ireaderlink")
@click.option("-v", "--verbose", count=True, help="Increase log output (-v, -vv).")
def cli(verbose: int) -> None:
    """ireaderlink - check Douban books against the iReader storefront."""
    _configure_logging(verbose)


cli.add_command(lookup_cmd.lookup)
cli.add_command(batch_cmd.batch)
cli.add_command(page_cmd.page)
cli.add_command(cache_cmd.cache)
