"""DuckDuckGo web search tool."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from duckscout.tools.base import Tool
from duckscout.tools.websearch.client import DuckDuckGoSearchClient
from duckscout.tools.websearch.errors import WebSearchError
from duckscout.tools.websearch.models import SearchResult

if TYPE_CHECKING:
    from duckscout.config.schema import WebSearchConfig

TOOL_NAME = "duckduckgo_web_search"
DEFAULT_CLIENT_ID = "127.0.0.1"
DEFAULT_COUNT = 10
MAX_COUNT = 20

_HEADING = "# DuckDuckGo Search Results"


def clamp_count(count: Any) -> int:
    """Missing, zero or non-numeric counts mean the default; others are clamped to 1..20."""
    try:
        value = int(count) if not isinstance(count, bool) else 0
    except (TypeError, ValueError):
        value = 0
    return min(max(value or DEFAULT_COUNT, 1), MAX_COUNT)


def format_results(query: str, results: list[SearchResult]) -> str:
    """Render results as markdown."""
    if not results:
        return f'{_HEADING}\nNo results for "{query}".'

    entries = [
        f"### {item.title}\n{item.description}\n[Read more]({item.url})"
        for item in results
    ]
    return f"{_HEADING}\nQuery: {query} ({len(results)} found)\n\n---\n\n" + "\n\n".join(entries)


def format_failure(message: str) -> str:
    return (
        f"Search unavailable.\nReason: {message}\n\n"
        "DuckDuckGo blocks cloud scrapers aggressively. "
        "Try a simpler query or run the search from a residential network."
    )


class WebSearchTool(Tool):
    """Search the web through DuckDuckGo's HTML endpoint."""

    name = TOOL_NAME
    description = "Search the web with DuckDuckGo. Returns titles, URLs, and snippets."
    parameters = {
        "type": "object",
        "properties": {
            "query": {"type": "string", "minLength": 1, "description": "Search query"},
            "count": {
                "type": "integer",
                "description": f"Results (1-{MAX_COUNT}, default {DEFAULT_COUNT})",
            },
        },
        "required": ["query"],
    }

    def __init__(
        self,
        web_search_config: WebSearchConfig | None = None,
        *,
        client: DuckDuckGoSearchClient | None = None,
    ):
        self.client = client or DuckDuckGoSearchClient(web_search_config)

    async def search(
        self,
        query: str,
        count: Any = None,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> list[SearchResult]:
        return await self.client.search(
            query=query,
            count=clamp_count(count),
            client_id=client_id or DEFAULT_CLIENT_ID,
        )

    async def execute(
        self,
        query: str,
        count: int | None = None,
        client_id: str = DEFAULT_CLIENT_ID,
        **kwargs: Any,
    ) -> str:
        if not query.strip():
            return "Error: query must not be empty"
        try:
            results = await self.search(query, count, client_id)
        except WebSearchError as e:
            return f"Error: {e}"
        return format_results(query, results)
