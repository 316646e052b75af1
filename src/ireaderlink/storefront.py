# ABOUTME: Addresses and URL builders for the iReader (m.zhangyue.com) storefront.
# ABOUTME: Shared by the HTTP client, the result parser, and the match resolver.

from urllib.parse import quote

STOREFRONT_BASE = "https://m.zhangyue.com"

# Returns {"html": "<escaped fragment>"} for a keyword search.
_SEARCH_API_PATH = "/search/more"

# Human-facing search page, used when a lookup cannot pick one book.
_SEARCH_PAGE_PATH = "/search"

# Book detail pages live under this path segment.
DETAIL_PATH_MARKER = "/detail/"


def search_api_url(title: str) -> str:
    """Build the search API URL for a raw title."""
    return f"{STOREFRONT_BASE}{_SEARCH_API_PATH}?keyWord={quote(title, safe='')}"


def search_page_url(title: str) -> str:
    """Build the browsable search page URL for a raw title."""
    return f"{STOREFRONT_BASE}{_SEARCH_PAGE_PATH}?keyWord={quote(title, safe='')}"
