"""Browser header profiles for human-looking navigation requests."""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HeaderProfile:
    """Immutable set of headers a real browser sends with every navigation."""

    profile_id: str
    user_agent: str
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
    accept_language: str = "en-US,en;q=0.9"
    client_hints: tuple[tuple[str, str], ...] = ()


_CHROME_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
    "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
)
_CHROME_UA_BRANDS = '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"'


def _chrome_hints(platform: str) -> tuple[tuple[str, str], ...]:
    return (
        ("Sec-CH-UA", _CHROME_UA_BRANDS),
        ("Sec-CH-UA-Mobile", "?0"),
        ("Sec-CH-UA-Platform", f'"{platform}"'),
    )


PROFILES: tuple[HeaderProfile, ...] = (
    HeaderProfile(
        profile_id="chrome-windows",
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        accept=_CHROME_ACCEPT,
        client_hints=_chrome_hints("Windows"),
    ),
    HeaderProfile(
        profile_id="chrome-macos",
        user_agent=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        accept=_CHROME_ACCEPT,
        client_hints=_chrome_hints("macOS"),
    ),
    HeaderProfile(
        profile_id="chrome-linux",
        user_agent=(
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        accept=_CHROME_ACCEPT,
        client_hints=_chrome_hints("Linux"),
    ),
    HeaderProfile(
        profile_id="firefox-windows",
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:134.0) Gecko/20100101 Firefox/134.0",
        accept_language="en-US,en;q=0.5",
    ),
)


def pick_profile(rng: random.Random | None = None) -> HeaderProfile:
    """Select a header profile for a new session."""
    return (rng or random).choice(PROFILES)


def build_headers(
    profile: HeaderProfile,
    *,
    referer: str | None = None,
    cookies: str = "",
) -> dict[str, str]:
    """Build the request headers of a top-level browser navigation."""
    headers = {
        "User-Agent": profile.user_agent,
        "Accept": profile.accept,
        "Accept-Language": profile.accept_language,
        "Accept-Encoding": "gzip, deflate, br",
        "DNT": "1",
        "Sec-GPC": "1",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "same-origin" if referer else "none",
        "Sec-Fetch-User": "?1",
        "Cache-Control": "max-age=0",
    }
    headers.update(profile.client_hints)
    if referer:
        headers["Referer"] = referer
    if cookies:
        headers["Cookie"] = cookies
    return headers
