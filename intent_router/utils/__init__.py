"""Utility functions for intent_router."""

from intent_router.utils.logging import configure_logging

__all__ = ["configure_logging"]
