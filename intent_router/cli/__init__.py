"""CLI module for intent_router."""
