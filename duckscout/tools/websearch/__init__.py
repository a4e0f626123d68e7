"""DuckDuckGo search pipeline: sessions, rate limiting, extraction and fallbacks."""

from duckscout.tools.websearch.client import DuckDuckGoSearchClient
from duckscout.tools.websearch.errors import (
    BlockedByAntiBot,
    InvalidRequest,
    RateLimited,
    SearchUnavailable,
    TransientNetworkFailure,
    WebSearchError,
)
from duckscout.tools.websearch.models import SearchResult

__all__ = [
    "BlockedByAntiBot",
    "DuckDuckGoSearchClient",
    "InvalidRequest",
    "RateLimited",
    "SearchResult",
    "SearchUnavailable",
    "TransientNetworkFailure",
    "WebSearchError",
]
