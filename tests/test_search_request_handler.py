import json

import httpx
import pytest

from duckscout.config.schema import WebSearchConfig
from duckscout.server import SearchRequestHandler, client_identity
from duckscout.tools.web import WebSearchTool
from duckscout.tools.websearch.client import DuckDuckGoSearchClient
from duckscout.tools.websearch.errors import RateLimited, SearchUnavailable
from duckscout.tools.websearch.models import SearchResult


class StubSearchClient:
    def __init__(self, results=None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.calls: list[dict] = []

    async def search(self, *, query: str, count: int, client_id: str):
        self.calls.append({"query": query, "count": count, "client_id": client_id})
        if self.error:
            raise self.error
        return self.results


def _handler(stub: StubSearchClient) -> SearchRequestHandler:
    return SearchRequestHandler(WebSearchTool(client=stub))  # type: ignore[arg-type]


def _text(payload: dict) -> str:
    return payload["content"][0]["text"]


def test_client_identity() -> None:
    assert client_identity({"X-Forwarded-For": " 203.0.113.7 , 10.0.0.1"}) == "203.0.113.7"
    assert client_identity({"x-forwarded-for": "198.51.100.2"}) == "198.51.100.2"
    assert client_identity({"X-Forwarded-For": ""}) == "127.0.0.1"
    assert client_identity({}) == "127.0.0.1"
    assert client_identity(None) == "127.0.0.1"


@pytest.mark.asyncio
async def test_non_post_is_rejected() -> None:
    stub = StubSearchClient()
    status, payload = await _handler(stub).handle("GET", {}, None)

    assert status == 405
    assert payload == {}
    assert stub.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        None,
        "not json",
        [],
        {"name": "other_tool", "arguments": {"query": "x"}},
        {"name": "duckduckgo_web_search"},
        {"name": "duckduckgo_web_search", "arguments": {}},
        {"name": "duckduckgo_web_search", "arguments": {"query": ""}},
        {"name": "duckduckgo_web_search", "arguments": {"query": "   "}},
        {"name": "duckduckgo_web_search", "arguments": {"query": 42}},
    ],
)
async def test_malformed_requests_get_400(body) -> None:
    stub = StubSearchClient()
    status, payload = await _handler(stub).handle("POST", {}, body)

    assert status == 400
    assert payload == {
        "content": [{"type": "text", "text": "Invalid request format"}],
        "isError": True,
    }
    assert stub.calls == []


@pytest.mark.asyncio
async def test_success_returns_markdown() -> None:
    stub = StubSearchClient(
        [SearchResult(title="Rust", url="https://rust-lang.org/", description="Fast")]
    )
    body = json.dumps(
        {"name": "duckduckgo_web_search", "arguments": {"query": "rust programming", "count": 50}}
    )

    status, payload = await _handler(stub).handle(
        "POST", {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}, body
    )

    assert status == 200
    assert payload["isError"] is False
    assert _text(payload).startswith("# DuckDuckGo Search Results\nQuery: rust programming (1 found)")
    assert stub.calls == [{"query": "rust programming", "count": 20, "client_id": "203.0.113.7"}]


@pytest.mark.asyncio
async def test_zero_results_is_not_an_error() -> None:
    status, payload = await _handler(StubSearchClient([])).handle(
        "POST", {}, {"name": "duckduckgo_web_search", "arguments": {"query": "zzzz"}}
    )

    assert status == 200
    assert payload["isError"] is False
    assert _text(payload) == '# DuckDuckGo Search Results\nNo results for "zzzz".'


@pytest.mark.asyncio
async def test_rate_limited_gets_429() -> None:
    stub = StubSearchClient(error=RateLimited("Rate limit: 3 requests per 60s per client"))
    status, payload = await _handler(stub).handle(
        "POST", {}, {"name": "duckduckgo_web_search", "arguments": {"query": "x"}}
    )

    assert status == 429
    assert payload["isError"] is True
    assert "Rate limit" in _text(payload)


@pytest.mark.asyncio
async def test_search_failure_is_reported_in_payload() -> None:
    stub = StubSearchClient(error=SearchUnavailable("Blocked by anti-bot system (HTTP 403)"))
    status, payload = await _handler(stub).handle(
        "POST", {}, {"name": "duckduckgo_web_search", "arguments": {"query": "x"}}
    )

    assert status == 200
    assert payload["isError"] is True
    assert "Reason: Blocked by anti-bot system (HTTP 403)" in _text(payload)


@pytest.mark.asyncio
async def test_unexpected_error_is_still_answered() -> None:
    stub = StubSearchClient(error=KeyError("boom"))
    status, payload = await _handler(stub).handle(
        "POST", {}, {"name": "duckduckgo_web_search", "arguments": {"query": "x"}}
    )

    assert status == 200
    assert payload["isError"] is True
    assert _text(payload).startswith("Search unavailable.")


@pytest.mark.asyncio
async def test_end_to_end_rate_gate_stops_fourth_request() -> None:
    def transport_handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/":
            return httpx.Response(200, headers={"set-cookie": "a=1"})
        return httpx.Response(
            200,
            text='<div class="result__body"><a class="result__a" href="https://example.com/">Ex</a></div>',
        )

    async def no_sleep(seconds: float) -> None:
        return None

    client = DuckDuckGoSearchClient(
        WebSearchConfig(),
        transport=httpx.MockTransport(transport_handler),
        library_search=None,
        sleep=no_sleep,
    )
    handler = SearchRequestHandler(WebSearchTool(client=client))
    body = {"name": "duckduckgo_web_search", "arguments": {"query": "x"}}
    headers = {"X-Forwarded-For": "192.0.2.1"}

    statuses = [(await handler.handle("POST", headers, body))[0] for _ in range(4)]
    other_status, _ = await handler.handle("POST", {"X-Forwarded-For": "192.0.2.2"}, body)

    assert statuses == [200, 200, 200, 429]
    assert other_status == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("count", "expected"),
    [(None, 10), (5.0, 5), ("5", 5), ("many", 10), (0, 10), (-3, 1), (99, 20)],
)
async def test_loose_count_values_are_clamped_not_rejected(count, expected) -> None:
    stub = StubSearchClient([])
    status, payload = await _handler(stub).handle(
        "POST",
        {},
        {"name": "duckduckgo_web_search", "arguments": {"query": "x", "count": count}},
    )

    assert status == 200
    assert payload["isError"] is False
    assert stub.calls == [{"query": "x", "count": expected, "client_id": "127.0.0.1"}]
