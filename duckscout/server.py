"""Framework-agnostic handler for inbound search tool calls."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from loguru import logger

from duckscout.tools.registry import ToolRegistry
from duckscout.tools.web import (
    DEFAULT_CLIENT_ID,
    TOOL_NAME,
    WebSearchTool,
    format_failure,
    format_results,
)
from duckscout.tools.websearch.errors import InvalidRequest, RateLimited, WebSearchError

Response = tuple[int, dict[str, Any]]


def envelope(text: str, *, is_error: bool) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


def client_identity(headers: Mapping[str, str] | None) -> str:
    """First X-Forwarded-For hop, or the loopback sentinel."""
    for key, value in (headers or {}).items():
        if key.lower() == "x-forwarded-for" and value:
            first = value.split(",")[0].strip()
            if first:
                return first
    return DEFAULT_CLIENT_ID


class SearchRequestHandler:
    """
    Turn a raw tool-call request into a (status, payload) pair.

    The web framework owns routing and serialization; this class owns the
    contract: 405 for non-POST, 400 for malformed calls, 429 when the client is
    over quota and 200 for everything else, with search failures reported in
    the payload.
    """

    def __init__(self, tool: WebSearchTool, registry: ToolRegistry | None = None):
        self.tool = tool
        self.registry = registry or ToolRegistry()
        if not self.registry.has(tool.name):
            self.registry.register(tool)

    async def handle(
        self,
        method: str,
        headers: Mapping[str, str] | None,
        body: Any,
    ) -> Response:
        if (method or "").upper() != "POST":
            return 405, {}

        client_id = client_identity(headers)
        query = ""
        try:
            query, count = self._parse(body)
            results = await self.tool.search(query, count, client_id)
        except InvalidRequest as e:
            logger.info("Rejected request from {}: {}", client_id, e)
            return 400, envelope("Invalid request format", is_error=True)
        except RateLimited as e:
            logger.info("Rate limited {}: {}", client_id, e)
            return 429, envelope(str(e), is_error=True)
        except WebSearchError as e:
            logger.error("Search failed for {} (query={!r}): {}", client_id, query, e)
            return 200, envelope(format_failure(str(e)), is_error=True)
        except Exception as e:
            logger.exception("Unexpected error handling search for {}", client_id)
            return 200, envelope(format_failure(str(e) or type(e).__name__), is_error=True)

        return 200, envelope(format_results(query, results), is_error=False)

    def _parse(self, body: Any) -> tuple[str, Any]:
        if isinstance(body, (str, bytes)):
            try:
                body = json.loads(body or "{}")
            except ValueError as e:
                raise InvalidRequest(f"body is not valid JSON: {e}") from e
        if not isinstance(body, dict):
            raise InvalidRequest("body must be a JSON object")

        name = body.get("name")
        if name != TOOL_NAME or self.registry.get(name) is None:
            raise InvalidRequest(f"unknown tool: {name!r}")

        args = body.get("arguments")
        if not isinstance(args, dict):
            raise InvalidRequest("arguments must be an object")
        # count is clamped downstream, never rejected
        errors = self.tool.validate_params({k: v for k, v in args.items() if k != "count"})
        if errors:
            raise InvalidRequest("; ".join(errors))

        query = args["query"]
        if not query.strip():
            raise InvalidRequest("query must not be empty")
        return query, args.get("count")
