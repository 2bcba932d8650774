"""LLM provider abstraction module."""

from intent_router.providers.base import LLMProvider, LLMResponse
from intent_router.providers.litellm_provider import LiteLLMProvider

__all__ = ["LLMProvider", "LLMResponse", "LiteLLMProvider"]
