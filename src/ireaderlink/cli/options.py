# ABOUTME: Shared Click options for ireaderlink CLI commands.
# ABOUTME: Cache location, network timeout, batch concurrency, and retry prompting.

from pathlib import Path

import click

from ireaderlink.cache.connection import DEFAULT_CACHE_PATH
from ireaderlink.core.orchestrator import BATCH_SIZE
from ireaderlink.matching.http import API_TIMEOUT

cache_option = click.option(
    "--cache",
    "cache_path",
    type=click.Path(path_type=Path),
    default=None,
    envvar="IREADERLINK_CACHE",
    help=f"Path to the lookup cache database (default: {DEFAULT_CACHE_PATH}).",
)

no_cache_option = click.option(
    "--no-cache",
    is_flag=True,
    default=False,
    help="Keep results in memory only; do not read or write the cache database.",
)

timeout_option = click.option(
    "--timeout",
    type=click.FloatRange(min=0.1),
    default=API_TIMEOUT,
    show_default=True,
    help="Seconds before a storefront request is abandoned.",
)

concurrency_option = click.option(
    "-c",
    "--concurrency",
    type=click.IntRange(min=1),
    default=BATCH_SIZE,
    show_default=True,
    help="Maximum storefront requests in flight at once.",
)

retry_option = click.option(
    "--retry/--no-retry",
    default=True,
    help="Offer to retry failed lookups (default: --retry).",
)
