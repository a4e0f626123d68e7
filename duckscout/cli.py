"""Command line entry point: run one search or print the tool definitions."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from loguru import logger

from duckscout import __version__
from duckscout.config.loader import load_config
from duckscout.config.schema import Config
from duckscout.tools.registry import ToolRegistry
from duckscout.tools.web import DEFAULT_CLIENT_ID, DEFAULT_COUNT, TOOL_NAME, WebSearchTool


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def build_registry(config: Config) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(WebSearchTool(web_search_config=config.search))
    return registry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="duckscout", description=__doc__)
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Run a DuckDuckGo search")
    search.add_argument("query")
    search.add_argument("--count", "-n", type=int, default=DEFAULT_COUNT)
    search.add_argument("--client-id", default=DEFAULT_CLIENT_ID)

    sub.add_parser("tools", help="Print tool definitions as JSON")
    return parser


async def _run(args: argparse.Namespace, config: Config) -> int:
    registry = build_registry(config)

    if args.command == "tools":
        print(json.dumps(registry.get_definitions(), indent=2, ensure_ascii=False))
        return 0

    result = await registry.execute(
        TOOL_NAME,
        {"query": args.query, "count": args.count, "client_id": args.client_id},
    )
    print(result)
    return 1 if result.startswith("Error") else 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging("DEBUG" if args.verbose else config.log_level)
    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    raise SystemExit(main())
