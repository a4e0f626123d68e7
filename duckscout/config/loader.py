"""Configuration loading utilities."""

import json
from pathlib import Path

from loguru import logger

from duckscout.config.schema import DEFAULT_RELAY_URL, Config


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".duckscout" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            data = _migrate_config(data)
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to load config from {}: {}", path, e)
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(by_alias=True)

    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def _migrate_config(data: dict) -> dict:
    """Bring a loaded config up to the current format."""
    search_cfg = data.setdefault("search", {})
    fallback_cfg = search_cfg.setdefault("fallback", {})

    # Fill default relay URL when missing/empty
    if not fallback_cfg.get("relayUrl"):
        fallback_cfg["relayUrl"] = DEFAULT_RELAY_URL

    return data
