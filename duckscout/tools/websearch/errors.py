"""Error taxonomy for the web search pipeline."""

from __future__ import annotations


class WebSearchError(Exception):
    """Base class for search failures."""


class InvalidRequest(WebSearchError):
    """Raised when the tool name or query is missing or malformed."""


class RateLimited(WebSearchError):
    """Raised when a client exceeded its request quota for the current window."""


class BlockedByAntiBot(WebSearchError):
    """Raised when the response shows the engine detected automated access."""


class TransientNetworkFailure(WebSearchError):
    """Raised on fetch errors, timeouts and non-2xx responses unrelated to blocking."""


class SearchUnavailable(WebSearchError):
    """Raised when the primary fetch and every fallback stage failed."""

    def __init__(self, message: str, attempts: list[tuple[str, str]] | None = None):
        super().__init__(message)
        self.attempts = attempts or []
