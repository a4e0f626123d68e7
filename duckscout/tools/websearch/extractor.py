"""Tolerant extraction of search results from DuckDuckGo markup."""

from __future__ import annotations

import html
import re
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup, Tag
from loguru import logger

from duckscout.tools.websearch.models import NO_TITLE, SearchResult

DEFAULT_ENGINE_HOST = "duckduckgo.com"

# Class names used by the html.duckduckgo.com result page.
RESULT_BLOCK_SELECTOR = ".result__body"
RESULT_LINK_SELECTOR = "a.result__a"
RESULT_SNIPPET_SELECTOR = ".result__snippet"

_EMPHASIS_TAGS = ["b", "strong"]
_MARKDOWN_LINK_RE = re.compile(r"\[(?P<text>[^\]\n]*)\]\((?P<href>[^)\s]+)(?:\s+\"[^\"]*\")?\)")
_MARKDOWN_EMPHASIS_RE = re.compile(r"(\*\*|__)(?P<text>.+?)\1")
_SPACE_RE = re.compile(r"\s+")


def parse_results(
    document: str,
    max_results: int,
    *,
    engine_host: str = DEFAULT_ENGINE_HOST,
) -> list[SearchResult]:
    """Extract up to `max_results` organic results in document order."""
    results: list[SearchResult] = []
    if max_results <= 0 or not document:
        return results

    soup = BeautifulSoup(document, "html.parser")
    for block in soup.select(RESULT_BLOCK_SELECTOR):
        if len(results) >= max_results:
            break
        try:
            result = _parse_block(block, engine_host)
        except Exception as e:
            logger.debug("Skipping malformed result block: {}", e)
            continue
        if result is not None:
            results.append(result)
    return results


def parse_relay_results(
    text: str,
    max_results: int,
    *,
    engine_host: str = DEFAULT_ENGINE_HOST,
) -> list[SearchResult]:
    """Extract title+URL pairs from a relay's markdown rendering of a result page."""
    results: list[SearchResult] = []
    if max_results <= 0 or not text:
        return results

    seen: set[str] = set()
    for match in _MARKDOWN_LINK_RE.finditer(text):
        if len(results) >= max_results:
            break
        if text[max(0, match.start() - 1)] == "!":
            continue
        try:
            url = normalize_result_url(html.unescape(match.group("href")), engine_host=engine_host)
        except ValueError as e:
            logger.debug("Skipping malformed relay link: {}", e)
            continue
        if url is None or url in seen:
            continue
        title = _MARKDOWN_EMPHASIS_RE.sub(r"\g<text>", match.group("text").lstrip("#"))
        seen.add(url)
        results.append(SearchResult(title=clean_text(title) or NO_TITLE, url=url))
    return results


def normalize_result_url(raw: str | None, *, engine_host: str = DEFAULT_ENGINE_HOST) -> str | None:
    """
    Return an absolute organic result URL, or None if the link should be skipped.

    DuckDuckGo redirect links (`//duckduckgo.com/l/?uddg=<target>`) are unwrapped
    to their target. Anything still pointing at the engine is navigation, not a
    result.
    """
    if not raw:
        return None
    url = raw.strip()

    parsed = urlparse(url)
    if _is_engine_host(parsed.hostname, engine_host) and parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            url = target[0].strip()
            parsed = urlparse(url)

    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        return None
    if _is_engine_host(parsed.hostname, engine_host):
        return None
    return url


def clean_text(value: str) -> str:
    """Strip markup, decode entities and normalize whitespace."""
    return _element_text(BeautifulSoup(value, "html.parser"))


def _parse_block(block: Tag, engine_host: str) -> SearchResult | None:
    anchor = block.select_one(RESULT_LINK_SELECTOR)
    if anchor is None:
        return None
    url = normalize_result_url(anchor.get("href"), engine_host=engine_host)
    if url is None:
        return None

    title = _element_text(anchor) or NO_TITLE
    snippet = block.select_one(RESULT_SNIPPET_SELECTOR)
    description = _element_text(snippet) if snippet is not None else ""
    return SearchResult(title=title, url=url, description=description)


def _element_text(element: Tag) -> str:
    # Emphasis is inline, so unwrap it before joining text nodes with spaces.
    for tag in element.find_all(_EMPHASIS_TAGS):
        tag.unwrap()
    element.smooth()
    return _SPACE_RE.sub(" ", element.get_text(" ", strip=True)).strip()


def _is_engine_host(host: str | None, engine_host: str) -> bool:
    if not host:
        return False
    host = host.rstrip(".").lower()
    engine_host = engine_host.lower()
    return host == engine_host or host.endswith("." + engine_host)
