"""Tool surface exposed to callers."""

from duckscout.tools.base import Tool
from duckscout.tools.registry import ToolRegistry

__all__ = ["Tool", "ToolRegistry"]
