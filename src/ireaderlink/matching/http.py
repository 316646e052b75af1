# ABOUTME: Async HTTP client for the iReader search API.
# ABOUTME: Single GET per lookup with an overall deadline; injectable transport for testing.

import asyncio
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from ireaderlink import __version__
from ireaderlink.storefront import search_api_url

logger = logging.getLogger(__name__)

API_TIMEOUT = 10.0


class SearchFetchError(Exception):
    """Raised when a storefront search request does not produce a response body."""


class SearchStatusError(SearchFetchError):
    """The storefront answered with a non-200 status."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"HTTP {status_code} from {url}")
        self.status_code = status_code


class SearchTransportError(SearchFetchError):
    """The request failed at the network level."""


class SearchTimeoutError(SearchFetchError):
    """The request did not finish within the deadline."""


@runtime_checkable
class SearchClient(Protocol):
    """Protocol for fetching the raw search API payload for a title."""

    async def fetch(self, title: str) -> str: ...


class IReaderHttpClient:
    """Search client backed by httpx.AsyncClient.

    Each fetch is a single attempt. Network errors, timeouts, and non-200
    statuses all surface as SearchFetchError subclasses; retrying is left to
    the caller.
    """

    def __init__(
        self,
        *,
        timeout: float = API_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": f"ireaderlink/{__version__}"},
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)
        self._timeout = timeout

    async def __aenter__(self) -> "IReaderHttpClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, title: str) -> str:
        """Fetch the search API response text for a raw title.

        Raises:
            SearchStatusError: On any status other than 200.
            SearchTransportError: On connection or protocol failures.
            SearchTimeoutError: When the request exceeds the timeout.
        """
        url = search_api_url(title)
        try:
            response = await asyncio.wait_for(self._client.get(url), timeout=self._timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise SearchTimeoutError(
                f"Request timed out after {self._timeout:g}s: {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SearchTransportError(f"Request failed: {url}: {exc}") from exc

        if response.status_code != 200:
            raise SearchStatusError(response.status_code, url)

        logger.debug("GET %s -> %d (%d bytes)", url, response.status_code, len(response.content))
        return response.text
