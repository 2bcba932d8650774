"""LiteLLM provider implementation for classifier calls."""

from typing import Any

import litellm
from litellm import acompletion

from intent_router.presets import CLASSIFIER_MODEL
from intent_router.providers.base import LLMProvider, LLMResponse


# Bedrock model ids carry a vendor segment ("us.amazon.nova-micro-v1:0")
_BEDROCK_VENDORS = ("anthropic.", "amazon.", "meta.", "mistral.", "cohere.")


class LiteLLMProvider(LLMProvider):
    """
    LLM provider using LiteLLM.

    Bedrock model ids from the preset catalog are routed through LiteLLM's
    ``bedrock/`` prefix; any other id is passed through unchanged.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        default_model: str = CLASSIFIER_MODEL,
        extra_headers: dict[str, str] | None = None,
    ):
        super().__init__(api_key, api_base)
        self.default_model = default_model
        self.extra_headers = extra_headers or {}

        # Disable LiteLLM logging noise
        litellm.suppress_debug_info = True
        # Drop parameters a provider does not support
        litellm.drop_params = True

    def _resolve_model(self, model: str) -> str:
        """Apply the LiteLLM provider prefix for bare Bedrock ids."""
        if "/" in model:
            return model
        if any(vendor in model for vendor in _BEDROCK_VENDORS):
            return f"bedrock/{model}"
        return model

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 300,
        temperature: float = 0.1,
    ) -> LLMResponse:
        """
        Send a chat completion request via LiteLLM.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            model: Model identifier (e.g. 'gpt-4o-mini' or a Bedrock id).
            max_tokens: Maximum tokens in response.
            temperature: Sampling temperature.

        Returns:
            LLMResponse with the reply text.
        """
        kwargs: dict[str, Any] = {
            "model": self._resolve_model(model or self.default_model),
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if self.extra_headers:
            kwargs["extra_headers"] = self.extra_headers

        try:
            response = await acompletion(**kwargs)
            return self._parse_response(response)
        except Exception as e:
            # Return error as content for graceful handling
            return LLMResponse(
                content=f"Error calling LLM: {str(e)}",
                finish_reason="error",
            )

    def _parse_response(self, response: Any) -> LLMResponse:
        """Parse LiteLLM response into our standard format."""
        choice = response.choices[0]

        usage = {}
        if hasattr(response, "usage") and response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=choice.message.content,
            finish_reason=choice.finish_reason or "stop",
            usage=usage,
        )

    def get_default_model(self) -> str:
        """Get the default model."""
        return self.default_model
