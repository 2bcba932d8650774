"""Configuration module for intent_router."""

from intent_router.config.loader import get_config_path, load_settings, save_settings
from intent_router.config.schema import ClassifierConfig, RouterConfig, RouterSettings

__all__ = [
    "ClassifierConfig",
    "RouterConfig",
    "RouterSettings",
    "get_config_path",
    "load_settings",
    "save_settings",
]
