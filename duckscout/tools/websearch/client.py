"""Human-like DuckDuckGo search with session reuse and a fallback chain."""

from __future__ import annotations

import random
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx
from loguru import logger

from duckscout.tools.websearch.errors import (
    BlockedByAntiBot,
    SearchUnavailable,
    TransientNetworkFailure,
    WebSearchError,
)
from duckscout.tools.websearch.extractor import parse_results
from duckscout.tools.websearch.models import SearchResult
from duckscout.tools.websearch.ratelimit import RateLimiter
from duckscout.tools.websearch.session import SearchSession, SessionManager
from duckscout.tools.websearch.sources import search_ddgs, search_relay
from duckscout.tools.websearch.timing import Jitter, Sleep

if TYPE_CHECKING:
    from duckscout.config.schema import WebSearchConfig

LibrarySearch = Callable[..., Awaitable[list[SearchResult]]]

BLOCK_STATUS_CODES = frozenset({403, 418, 429})


class DuckDuckGoSearchClient:
    """
    Search orchestrator.

    Each call passes the rate gate, reuses or opens a browsing session, waits a
    human-looking moment and fetches the HTML result page. When that fetch is
    blocked or fails, the fallback chain runs in order:

    1. the same request without cookies
    2. the ddgs library, if enabled
    3. a relay fetch with title+URL extraction, only after a block signal
    """

    def __init__(
        self,
        config: "WebSearchConfig | None" = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        library_search: LibrarySearch | None = search_ddgs,
        clock: Callable[[], float] = time.monotonic,
        sleep: Sleep | None = None,
        rng: random.Random | None = None,
    ):
        from duckscout.config.schema import WebSearchConfig

        self.config = config or WebSearchConfig()
        self._transport = transport
        self._library_search = library_search

        jitter_kwargs = {"sleep": sleep} if sleep is not None else {}
        self.jitter = Jitter(self.config.jitter, rng=rng, **jitter_kwargs)
        self.rate_limiter = RateLimiter(
            self.config.rate_limit.max_requests,
            self.config.rate_limit.window_seconds,
            clock=clock,
        )
        self.sessions = SessionManager(
            landing_url=self.landing_url,
            ttl_seconds=self.config.session.ttl_seconds,
            timeout=self.config.timeout,
            max_entries=self.config.session.max_entries,
            jitter=self.jitter,
            transport=transport,
            clock=clock,
            rng=rng,
        )

    @property
    def landing_url(self) -> str:
        return self.config.engine_url.rstrip("/") + "/"

    @property
    def search_url(self) -> str:
        return self.config.engine_url.rstrip("/") + self.config.search_path

    @property
    def engine_host(self) -> str:
        host = urlparse(self.config.engine_url).hostname or "duckduckgo.com"
        return host.removeprefix("www.").removeprefix("html.")

    async def search(self, *, query: str, count: int, client_id: str) -> list[SearchResult]:
        """Run one search for a client. Raises RateLimited or SearchUnavailable."""
        if len(self.rate_limiter) >= self.config.rate_limit.max_entries:
            self.rate_limiter.prune()
        self.rate_limiter.acquire(client_id)

        session = await self.sessions.get_or_create(client_id)
        await self.jitter.typing()

        try:
            return await self._fetch(query, count, session.headers(referer=self.landing_url))
        except (BlockedByAntiBot, TransientNetworkFailure) as e:
            logger.warning("Primary search failed for {}: {}", client_id, e)
            return await self._fallback(query, count, session, e)

    async def _fetch(self, query: str, count: int, headers: dict[str, str]) -> list[SearchResult]:
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(
                    self.search_url,
                    params={"q": query, "kl": self.config.region},
                    headers=headers,
                    timeout=self.config.timeout,
                )
        except httpx.HTTPError as e:
            raise TransientNetworkFailure(f"search request failed: {e}") from e

        if response.status_code in BLOCK_STATUS_CODES:
            raise BlockedByAntiBot(f"Blocked by anti-bot system (HTTP {response.status_code})")

        body = response.text
        marker = self._block_marker(body)
        if marker:
            raise BlockedByAntiBot(f"Blocked by anti-bot system (marker: {marker!r})")

        if not response.is_success:
            raise TransientNetworkFailure(f"HTTP {response.status_code}")

        return parse_results(body, count, engine_host=self.engine_host)

    async def _fallback(
        self,
        query: str,
        count: int,
        session: SearchSession,
        primary_error: WebSearchError,
    ) -> list[SearchResult]:
        fallback = self.config.fallback
        errors: list[tuple[str, WebSearchError]] = [("primary", primary_error)]
        answered_empty = False

        if fallback.cookieless_retry:
            try:
                results = await self._fetch(
                    query,
                    count,
                    session.headers(referer=self.landing_url, with_cookies=False),
                )
            except (BlockedByAntiBot, TransientNetworkFailure) as e:
                logger.warning("Cookie-less retry failed: {}", e)
                errors.append(("cookieless", e))
            else:
                if results:
                    logger.info("Cookie-less retry recovered {} results", len(results))
                    return results
                answered_empty = True

        if fallback.library and self._library_search is not None:
            try:
                results = await self._library_search(
                    query=query,
                    count=count,
                    timeout=self.config.timeout,
                    engine_host=self.engine_host,
                )
            except Exception as e:
                logger.warning("Library fallback failed: {}", e)
                errors.append(("library", TransientNetworkFailure(f"library search failed: {e}")))
            else:
                if results:
                    logger.info("Library fallback recovered {} results", len(results))
                    return results[:count]
                answered_empty = True

        blocked = any(isinstance(error, BlockedByAntiBot) for _, error in errors)
        if fallback.relay and fallback.relay_url and blocked:
            try:
                results = await search_relay(
                    query=query,
                    count=count,
                    relay_url=fallback.relay_url,
                    search_url=self.search_url,
                    region=self.config.region,
                    headers={
                        "User-Agent": session.profile.user_agent,
                        "Accept": "text/plain, text/markdown;q=0.9, */*;q=0.1",
                    },
                    timeout=self.config.timeout,
                    engine_host=self.engine_host,
                    transport=self._transport,
                )
            except TransientNetworkFailure as e:
                logger.warning("Relay fallback failed: {}", e)
                errors.append(("relay", e))
            else:
                if results:
                    logger.info("Relay fallback recovered {} results", len(results))
                    return results
                answered_empty = True

        if answered_empty:
            return []

        raise SearchUnavailable(
            str(self._most_specific(errors)),
            attempts=[(stage, str(error)) for stage, error in errors],
        )

    def _block_marker(self, body: str) -> str | None:
        lowered = body.lower()
        for marker in self.config.block_markers:
            if marker and marker.lower() in lowered:
                return marker
        return None

    @staticmethod
    def _most_specific(errors: list[tuple[str, WebSearchError]]) -> WebSearchError:
        for _, error in errors:
            if isinstance(error, BlockedByAntiBot):
                return error
        return errors[-1][1]
