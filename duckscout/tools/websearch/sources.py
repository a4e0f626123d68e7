"""Fallback result sources used when the HTML endpoint refuses to cooperate."""

from __future__ import annotations

import asyncio
from urllib.parse import urlencode

import httpx

from duckscout.tools.websearch.errors import TransientNetworkFailure
from duckscout.tools.websearch.extractor import (
    DEFAULT_ENGINE_HOST,
    clean_text,
    normalize_result_url,
    parse_relay_results,
)
from duckscout.tools.websearch.models import NO_TITLE, SearchResult


async def search_ddgs(
    *,
    query: str,
    count: int,
    timeout: float = 10.0,
    engine_host: str = DEFAULT_ENGINE_HOST,
) -> list[SearchResult]:
    """Search with the ddgs library and normalize results."""
    from ddgs import DDGS

    def _run() -> list[dict]:
        return list(DDGS(timeout=int(timeout)).text(query, safesearch="off", max_results=count) or [])

    raw = await asyncio.to_thread(_run)

    hits: list[SearchResult] = []
    for item in raw:
        if len(hits) >= count:
            break
        url = normalize_result_url(item.get("href") or item.get("url"), engine_host=engine_host)
        if url is None:
            continue
        hits.append(
            SearchResult(
                title=clean_text(item.get("title") or "") or NO_TITLE,
                url=url,
                description=clean_text(item.get("body") or ""),
            )
        )
    return hits


def relay_target_url(relay_url: str, search_url: str, *, query: str, region: str) -> str:
    """Embed the search URL, query included, in the relay endpoint URL."""
    target = f"{search_url}?{urlencode({'q': query, 'kl': region})}"
    return f"{relay_url.rstrip('/')}/{target}"


async def search_relay(
    *,
    query: str,
    count: int,
    relay_url: str,
    search_url: str,
    region: str,
    headers: dict[str, str],
    timeout: float = 10.0,
    engine_host: str = DEFAULT_ENGINE_HOST,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SearchResult]:
    """Fetch the result page through a third-party relay. Titles and URLs only."""
    url = relay_target_url(relay_url, search_url, query=query, region=region)
    try:
        async with httpx.AsyncClient(transport=transport, follow_redirects=True) as client:
            response = await client.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise TransientNetworkFailure(f"relay fetch failed: {e}") from e

    return parse_relay_results(response.text, count, engine_host=engine_host)
