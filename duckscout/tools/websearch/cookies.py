"""Set-Cookie parsing for session reuse."""

from __future__ import annotations

import re
from collections.abc import Iterable

# A comma only separates cookies when a new `name=` follows it; commas inside
# `expires=Wed, 21 Oct ...` dates are left alone.
_COOKIE_SPLIT_RE = re.compile(r",(?=\s*[^;,=\s]+=)")

_ATTRIBUTE_NAMES = {
    "path",
    "expires",
    "domain",
    "max-age",
    "samesite",
    "secure",
    "httponly",
    "priority",
    "partitioned",
}


def extract_cookies(raw: str | Iterable[str] | None) -> str:
    """Reduce raw Set-Cookie header value(s) to a reusable Cookie header string."""
    if not raw:
        return ""
    if not isinstance(raw, str):
        raw = ", ".join(value for value in raw if isinstance(value, str))

    pairs: list[str] = []
    for entry in _COOKIE_SPLIT_RE.split(raw):
        pair = entry.split(";", 1)[0].strip()
        name, sep, _ = pair.partition("=")
        name = name.strip()
        if not sep or not name or " " in name:
            continue
        if name.lower() in _ATTRIBUTE_NAMES:
            continue
        pairs.append(pair)
    return "; ".join(pairs)
