"""Route a query to tools and a concrete model id."""

from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from .analyzer import analyze_query
from .complexity import is_deep_analysis_request, score_query_complexity
from .config.schema import RouterConfig
from .models import ModelTier, Tool
from .presets import DEFAULT_PROVIDER, get_model_for_tier, get_preset


TOOL_TIER_REASON = "Elevated to moderate tier for tool usage"
ARTIFACT_CAP_REASON = "Capped at complex tier for artifact generation"


@dataclass
class UniversalRoutingResult:
    """Tools, tier and backing model for one query."""
    tools: list[Tool]
    tool_reasoning: str
    confidence: float
    model: str
    tier: ModelTier
    score: float
    reason: str
    used_llm_fallback: bool = False
    clarification_prompt: Optional[str] = None
    clarification_options: Optional[list[str]] = None
    classifier_usage: Any = None


def apply_tier_rules(
    query: str,
    tier: ModelTier,
    tools: list[Tool],
) -> tuple[ModelTier, Optional[str]]:
    """
    Apply the tool-driven tier adjustments, in order.

    1. Any selected tool needs at least the moderate tier.
    2. Artifact generation is capped at complex unless deep analysis is requested.

    Returns the adjusted tier and the reason of the last rule that changed it.
    """
    reason = None
    if tools and tier == ModelTier.SIMPLE:
        tier = ModelTier.MODERATE
        reason = TOOL_TIER_REASON

    if Tool.ARTIFACTS in tools and tier > ModelTier.COMPLEX and not is_deep_analysis_request(query):
        tier = tier.at_most(ModelTier.COMPLEX)
        reason = ARTIFACT_CAP_REASON

    return tier, reason


async def route_query(query: str, config: Optional[RouterConfig] = None) -> UniversalRoutingResult:
    """
    Full routing: tool analysis, tier scoring, optional classifier, model mapping.

    Args:
        query: User query text.
        config: Routing configuration; defaults route with no tools on Bedrock.

    Raises:
        ValueError: If the configured provider or preset is unknown.
    """
    config = config or RouterConfig()
    # Fail on a bad preset before any classifier call
    get_preset(config.provider, config.preset)

    result = await analyze_query(
        config.to_context(query),
        classifier=config.classifier,
        fallback_threshold=config.fallback_threshold,
        policy=config.policy,
        escalate_on_pronoun=config.escalate_on_pronoun,
    )

    tools = result.tools.tools
    tier, rule_reason = apply_tier_rules(query, result.model.tier, tools)
    model = get_model_for_tier(tier, config.preset, config.provider)

    logger.debug(
        f"Routed to {model} ({tier.value}), tools [{', '.join(t.value for t in tools) or 'none'}]"
        + (" via classifier" if result.used_llm_fallback else "")
    )

    return UniversalRoutingResult(
        tools=list(tools),
        tool_reasoning=result.tools.reasoning,
        confidence=result.tools.confidence,
        model=model,
        tier=tier,
        score=result.model.score,
        reason=rule_reason or result.model.reasoning,
        used_llm_fallback=result.used_llm_fallback,
        clarification_prompt=result.tools.clarification_prompt,
        clarification_options=result.tools.clarification_options,
        classifier_usage=result.classifier_usage,
    )


def route_to_model(
    query: str,
    provider: str = DEFAULT_PROVIDER,
    preset: Optional[str] = None,
    has_tools: bool = False,
    policy: Optional[str] = None,
) -> dict[str, Any]:
    """Tier-only routing without tool analysis.

    Returns ``{"model", "tier", "score", "reason"}``.
    """
    scored = score_query_complexity(query, policy)
    tier, reason = scored.tier, scored.reasoning
    if has_tools and tier == ModelTier.SIMPLE:
        tier, reason = ModelTier.MODERATE, TOOL_TIER_REASON

    return {
        "model": get_model_for_tier(tier, preset, provider),
        "tier": tier,
        "score": scored.score,
        "reason": reason,
    }
