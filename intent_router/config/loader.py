"""Configuration loading utilities."""

import json
import os
from pathlib import Path

from loguru import logger

from intent_router.config.schema import RouterSettings


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".intent-router" / "config.json"


def load_settings(config_path: Path | None = None) -> RouterSettings:
    """
    Load router settings from file or create defaults.

    Environment variables (``INTENT_ROUTER_*``) are applied on top of defaults
    when the file is missing or unreadable.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded settings object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            return RouterSettings.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    return RouterSettings()


def save_settings(settings: RouterSettings, config_path: Path | None = None) -> None:
    """
    Save settings to file with owner-only permissions.

    Args:
        settings: Settings to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(by_alias=True)

    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    # Classifier API keys may be stored here (0600 = owner read/write only)
    os.chmod(path, 0o600)
    logger.debug(f"Config saved: {path}")
