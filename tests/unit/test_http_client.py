# ABOUTME: Unit tests for the iReader search HTTP client.
# ABOUTME: Tests the SearchClient protocol, IReaderHttpClient, deadlines, and error mapping.

import asyncio

import httpx
import pytest

from ireaderlink.matching.http import (
    IReaderHttpClient,
    SearchClient,
    SearchFetchError,
    SearchStatusError,
    SearchTimeoutError,
    SearchTransportError,
)


class FakeAsyncTransport(httpx.AsyncBaseTransport):
    """Fake async transport that returns canned responses or raises."""

    def __init__(
        self,
        responses: list[httpx.Response] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._responses = list(responses or [])
        self._error = error
        self._delay = delay
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        if self._responses:
            return self._responses.pop(0)
        return httpx.Response(200, text='{"html": ""}')


class TestSearchClientProtocol:
    """Tests for SearchClient protocol compliance."""

    def test_ireader_client_satisfies_protocol(self) -> None:
        """IReaderHttpClient satisfies the SearchClient protocol."""
        client = IReaderHttpClient(transport=FakeAsyncTransport())
        assert isinstance(client, SearchClient)


class TestIReaderHttpClient:
    """Tests for IReaderHttpClient."""

    @pytest.mark.asyncio
    async def test_fetch_returns_body_text(self) -> None:
        """A 200 response body is returned verbatim."""
        transport = FakeAsyncTransport([httpx.Response(200, text='{"html": "<p>x</p>"}')])
        async with IReaderHttpClient(transport=transport) as client:
            assert await client.fetch("三体") == '{"html": "<p>x</p>"}'

    @pytest.mark.asyncio
    async def test_fetch_requests_search_endpoint(self) -> None:
        """The request goes to /search/more with the raw title as keyWord."""
        transport = FakeAsyncTransport()
        async with IReaderHttpClient(transport=transport) as client:
            await client.fetch("三体（全集）")

        [request] = transport.requests
        assert request.method == "GET"
        assert request.url.host == "m.zhangyue.com"
        assert request.url.path == "/search/more"
        assert request.url.params["keyWord"] == "三体（全集）"

    @pytest.mark.asyncio
    async def test_single_request_per_fetch(self) -> None:
        """A fetch makes exactly one attempt, even when it fails."""
        transport = FakeAsyncTransport([httpx.Response(500)])
        async with IReaderHttpClient(transport=transport) as client:
            with pytest.raises(SearchFetchError):
                await client.fetch("三体")
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_user_agent_header(self) -> None:
        """Requests carry the ireaderlink User-Agent."""
        transport = FakeAsyncTransport()
        async with IReaderHttpClient(transport=transport) as client:
            await client.fetch("三体")
        assert "ireaderlink/" in transport.requests[0].headers["user-agent"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 500, 503])
    async def test_non_200_raises_status_error(self, status: int) -> None:
        """Any status other than 200 is a failure."""
        transport = FakeAsyncTransport([httpx.Response(status)])
        async with IReaderHttpClient(transport=transport) as client:
            with pytest.raises(SearchStatusError) as exc_info:
                await client.fetch("三体")
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_redirect_is_not_followed(self) -> None:
        """A 3xx answer is reported as a status failure."""
        transport = FakeAsyncTransport(
            [httpx.Response(302, headers={"Location": "https://m.zhangyue.com/"})]
        )
        async with IReaderHttpClient(transport=transport) as client:
            with pytest.raises(SearchStatusError):
                await client.fetch("三体")

    @pytest.mark.asyncio
    async def test_connect_error_raises_transport_error(self) -> None:
        """Network failures surface as SearchTransportError."""
        transport = FakeAsyncTransport(error=httpx.ConnectError("connection refused"))
        async with IReaderHttpClient(transport=transport) as client:
            with pytest.raises(SearchTransportError):
                await client.fetch("三体")

    @pytest.mark.asyncio
    async def test_httpx_timeout_raises_timeout_error(self) -> None:
        """An httpx-level timeout surfaces as SearchTimeoutError."""
        transport = FakeAsyncTransport(error=httpx.ReadTimeout("read timed out"))
        async with IReaderHttpClient(transport=transport) as client:
            with pytest.raises(SearchTimeoutError):
                await client.fetch("三体")

    @pytest.mark.asyncio
    async def test_overall_deadline_raises_timeout_error(self) -> None:
        """A request still pending at the deadline is abandoned."""
        transport = FakeAsyncTransport(delay=5.0)
        async with IReaderHttpClient(timeout=0.05, transport=transport) as client:
            with pytest.raises(SearchTimeoutError):
                await client.fetch("三体")

    def test_errors_share_base_class(self) -> None:
        """Every failure mode is catchable as SearchFetchError."""
        assert issubclass(SearchStatusError, SearchFetchError)
        assert issubclass(SearchTransportError, SearchFetchError)
        assert issubclass(SearchTimeoutError, SearchFetchError)
