"""Configuration schema using Pydantic."""

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings

from intent_router.complexity import DEFAULT_POLICY, POLICIES
from intent_router.escalation import DEFAULT_FALLBACK_THRESHOLD
from intent_router.models import QueryContext, Tool, coerce_tools
from intent_router.presets import DEFAULT_PROVIDER, PROVIDER_PRESETS


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_policy(value: str) -> str:
    if value not in POLICIES:
        raise ValueError(f"Unknown scoring policy '{value}'. Available: {', '.join(POLICIES)}")
    return value


def _check_provider(value: str) -> str:
    if value not in PROVIDER_PRESETS:
        raise ValueError(f"Unknown provider '{value}'. Available: {', '.join(PROVIDER_PRESETS)}")
    return value


class ClassifierConfig(Base):
    """Configuration for the provider-backed fallback classifier."""
    enabled: bool = False  # Off unless a provider key is configured
    model: str = "gpt-4o-mini"
    timeout_ms: int = 1500
    # Optional secondary model to use if the primary classifier call fails
    secondary_model: str | None = None
    api_key: str | None = None
    api_base: str | None = None


class RouterConfig(Base):
    """Per-call routing configuration for ``route_query``.

    Tool lists accept ``Tool`` members or capability names; unknown names are
    dropped. History entries may be ``ConversationTurn`` objects or
    ``{role, content}`` dicts.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    provider: str = DEFAULT_PROVIDER
    preset: str | None = None  # Provider default when unset
    available_tools: list[Tool] = Field(default_factory=list)
    auto_enabled_tools: list[Tool] = Field(default_factory=list)
    user_selected_tools: list[Tool] = Field(default_factory=list)
    attached_files: Any = None
    conversation_history: list[Any] = Field(default_factory=list)
    previous_tool_context: Any = None
    classifier: Optional[Callable[..., Any]] = Field(default=None, exclude=True)
    fallback_threshold: float = DEFAULT_FALLBACK_THRESHOLD
    policy: str = DEFAULT_POLICY
    escalate_on_pronoun: bool = True

    @field_validator("available_tools", "auto_enabled_tools", "user_selected_tools", mode="before")
    @classmethod
    def _coerce_tools(cls, value: Any) -> list[Tool]:
        return coerce_tools(value)

    @field_validator("conversation_history", mode="before")
    @classmethod
    def _default_history(cls, value: Any) -> list[Any]:
        return list(value or [])

    @field_validator("policy")
    @classmethod
    def _validate_policy(cls, value: str) -> str:
        return _check_policy(value)

    @field_validator("provider")
    @classmethod
    def _validate_provider(cls, value: str) -> str:
        return _check_provider(value)

    def to_context(self, query: str) -> QueryContext:
        """Build the QueryContext for one query."""
        return QueryContext(
            query=query,
            available_tools=list(self.available_tools),
            auto_enabled_tools=list(self.auto_enabled_tools),
            user_selected_tools=list(self.user_selected_tools),
            attached_files=self.attached_files,
            conversation_history=list(self.conversation_history),
            previous_tool_context=self.previous_tool_context,
        )


class RouterSettings(BaseSettings):
    """Persisted router defaults, overridable from the environment."""
    provider: str = DEFAULT_PROVIDER
    preset: str | None = None
    fallback_threshold: float = DEFAULT_FALLBACK_THRESHOLD
    policy: str = DEFAULT_POLICY
    escalate_on_pronoun: bool = True
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    log_level: str = "WARNING"

    @field_validator("policy")
    @classmethod
    def _validate_policy(cls, value: str) -> str:
        return _check_policy(value)

    @field_validator("provider")
    @classmethod
    def _validate_provider(cls, value: str) -> str:
        return _check_provider(value)

    def router_config(self, **overrides: Any) -> RouterConfig:
        """Build a RouterConfig from these defaults plus per-call overrides."""
        values = {
            "provider": self.provider,
            "preset": self.preset,
            "fallback_threshold": self.fallback_threshold,
            "policy": self.policy,
            "escalate_on_pronoun": self.escalate_on_pronoun,
        }
        values.update(overrides)
        return RouterConfig(**values)

    def build_classifier(self):
        """Create an LLMClassifier from the classifier settings, or None when disabled."""
        if not self.classifier.enabled:
            return None

        from intent_router.llm_router import LLMClassifier
        from intent_router.providers.litellm_provider import LiteLLMProvider

        provider = LiteLLMProvider(
            api_key=self.classifier.api_key,
            api_base=self.classifier.api_base,
            default_model=self.classifier.model,
        )
        return LLMClassifier(
            provider=provider,
            model=self.classifier.model,
            timeout_ms=self.classifier.timeout_ms,
            secondary_model=self.classifier.secondary_model,
        )

    model_config = ConfigDict(
        env_prefix="INTENT_ROUTER_",
        env_nested_delimiter="__"
    )
