"""Unified routing: tools plus tier, with follow-up inheritance and classifier fallback."""

from dataclasses import replace
from typing import Optional

from loguru import logger

from .aggregator import analyze_tools, score_query_intent
from .complexity import PolicyLike, score_query_complexity
from .escalation import DEFAULT_FALLBACK_THRESHOLD, decide_escalation
from .history import extract_previous_tool_context
from .llm_router import ClassifierFunction, classify_with_llm
from .models import (
    ModelRoutingResult,
    QueryContext,
    Tool,
    UnifiedQueryResult,
)

__all__ = [
    "analyze_query",
    "analyze_model_tier",
    "should_use_tool",
    "score_query_intent",
]


async def analyze_query(
    context: Optional[QueryContext] = None,
    classifier: Optional[ClassifierFunction] = None,
    fallback_threshold: float = DEFAULT_FALLBACK_THRESHOLD,
    policy: PolicyLike = None,
    escalate_on_pronoun: bool = True,
    **fields,
) -> UnifiedQueryResult:
    """
    Decide tools and model tier for one query.

    Flow:
    1. Local tool analysis and complexity scoring
    2. Follow-up inheritance from the previous assistant turn (no classifier)
    3. Classifier escalation when the gate fires and a classifier is given
    4. Local result otherwise, or when the classifier fails

    Args:
        context: The query context. Alternatively pass its fields as keywords,
            e.g. ``analyze_query(query="...", available_tools=[...])``.
        classifier: Optional ``prompt -> str | ClassifierReply`` callable, sync or async.
        fallback_threshold: Tool confidence below which the gate escalates.
        policy: Complexity scoring policy name or object.
        escalate_on_pronoun: Escalate bare pronoun queries when history exists.

    Returns:
        UnifiedQueryResult. Never raises for degenerate input.
    """
    if context is None:
        context = QueryContext(**fields)
    elif fields:
        raise TypeError("Pass either a QueryContext or its fields, not both")

    query = context.query
    previous = context.previous_tool_context
    if previous is None and context.conversation_history:
        previous = extract_previous_tool_context(context.conversation_history)
        if previous is not None:
            context = replace(context, previous_tool_context=previous)

    tools_result = analyze_tools(context)
    model_result = score_query_complexity(query, policy)

    decision = decide_escalation(
        query,
        tools_result,
        model_result,
        previous,
        context.conversation_history,
        context.available_tools,
        has_classifier=classifier is not None,
        fallback_threshold=fallback_threshold,
        escalate_on_pronoun=escalate_on_pronoun,
    )

    if decision.inherited_result is not None:
        return decision.inherited_result

    if decision.should_use_llm:
        logger.debug(f"Escalating '{query[:50]}' to classifier ({', '.join(decision.triggers)})")
        llm_result = await classify_with_llm(
            query,
            context.available_tools,
            classifier,
            tools_result=tools_result,
            model_result=model_result,
            history=context.conversation_history,
            attached_files=context.attached_files,
        )
        if llm_result is not None:
            return llm_result
        logger.debug("Classifier unavailable, keeping local result")

    return UnifiedQueryResult(
        tools=tools_result,
        model=model_result,
        used_llm_fallback=False,
    )


def analyze_model_tier(query: str, policy: PolicyLike = None) -> ModelRoutingResult:
    """Tier-only analysis, no tool detection or classifier."""
    return score_query_complexity(query, policy)


def should_use_tool(tool: Tool, context: QueryContext) -> bool:
    """Quick check whether local analysis selects ``tool``."""
    return Tool.parse(tool) in analyze_tools(context).tools
