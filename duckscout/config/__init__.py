"""Configuration module for duckscout."""

from duckscout.config.loader import get_config_path, load_config
from duckscout.config.schema import Config, WebSearchConfig

__all__ = ["Config", "WebSearchConfig", "load_config", "get_config_path"]
