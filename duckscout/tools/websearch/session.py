"""Per-client browsing sessions: cookies plus a fixed header profile."""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx
from loguru import logger

from duckscout.tools.websearch.cookies import extract_cookies
from duckscout.tools.websearch.headers import HeaderProfile, build_headers, pick_profile
from duckscout.tools.websearch.timing import Jitter


@dataclass(frozen=True, slots=True)
class SearchSession:
    """Reusable browsing identity. Replaced, never updated in place."""

    cookies: str
    profile: HeaderProfile
    created_at: float

    def headers(self, *, referer: str | None = None, with_cookies: bool = True) -> dict[str, str]:
        return build_headers(
            self.profile,
            referer=referer,
            cookies=self.cookies if with_cookies else "",
        )


class SessionManager:
    """
    Map client identities to browsing sessions.

    A new session imitates a first visit: a short pause, then a cookie-less GET
    of the landing page whose Set-Cookie values become the session cookies.
    """

    def __init__(
        self,
        *,
        landing_url: str,
        ttl_seconds: float = 12 * 60,
        timeout: float = 10.0,
        max_entries: int = 10_000,
        jitter: Jitter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ):
        self.landing_url = landing_url
        self.ttl_seconds = ttl_seconds
        self.timeout = timeout
        self.max_entries = max_entries
        self.jitter = jitter or Jitter()
        self._transport = transport
        self._clock = clock
        self._rng = rng
        self._sessions: dict[str, SearchSession] = {}

    def get(self, client_id: str) -> SearchSession | None:
        """Return the live session for a client, evicting it if expired."""
        session = self._sessions.get(client_id)
        if session is None:
            return None
        if self._clock() - session.created_at > self.ttl_seconds:
            logger.debug("Session for {} expired, discarding", client_id)
            del self._sessions[client_id]
            return None
        return session

    async def get_or_create(self, client_id: str) -> SearchSession:
        """Reuse a live session or establish a new one."""
        session = self.get(client_id)
        if session is not None:
            return session

        await self.jitter.landing()
        session = await self.establish()
        if len(self) >= self.max_entries:
            self.prune()
        self._sessions[client_id] = session
        logger.info(
            "New search session for {} (profile={}, cookies={})",
            client_id,
            session.profile.profile_id,
            "yes" if session.cookies else "none",
        )
        return session

    async def establish(self) -> SearchSession:
        """Visit the landing page and capture its cookies. Never raises on network errors."""
        profile = pick_profile(self._rng)
        cookies = ""
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=True,
                timeout=self.timeout,
            ) as client:
                response = await client.get(self.landing_url, headers=build_headers(profile))
            if response.is_success:
                cookies = extract_cookies(response.headers.get_list("set-cookie"))
            else:
                logger.warning(
                    "Landing page returned HTTP {}, continuing without cookies",
                    response.status_code,
                )
        except httpx.HTTPError as e:
            logger.warning("Landing page fetch failed, continuing without cookies: {}", e)
        return SearchSession(cookies=cookies, profile=profile, created_at=self._clock())

    def prune(self) -> int:
        """Drop expired sessions. Returns how many were removed."""
        now = self._clock()
        expired = [
            key
            for key, session in self._sessions.items()
            if now - session.created_at > self.ttl_seconds
        ]
        for key in expired:
            del self._sessions[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
