"""Shared web search models."""

from dataclasses import dataclass

NO_TITLE = "No title"


@dataclass(slots=True)
class SearchResult:
    """Normalized search result item."""

    title: str
    url: str
    description: str = ""
