"""
duckscout - human-like DuckDuckGo web search
"""

__version__ = "0.1.0"
