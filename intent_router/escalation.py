"""Escalation gate: follow-up inheritance and classifier escalation triggers."""

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from loguru import logger

from .models import (
    ConversationTurn,
    ModelRoutingResult,
    ModelTier,
    PreviousToolContext,
    QueryIntentResult,
    Tool,
    UnifiedQueryResult,
)
from .patterns import (
    CONTEXT_DEPENDENT_LENGTH,
    CONTEXTUAL_PRONOUN_PATTERN,
    FOLLOW_UP_START_PATTERN,
    GREETING_PATTERN,
    NEW_TOPIC_PATTERN,
    OVERRIDE_KEYWORD_PATTERN,
    PRONOUN_START_PATTERN,
    SELECTION_PATTERNS,
    SHORT_FOLLOW_UP_LENGTH,
    any_match,
)


DEFAULT_FALLBACK_THRESHOLD = 0.4
INHERITED_CONFIDENCE = 0.7


@dataclass
class EscalationDecision:
    """Outcome of the gate for one query."""
    should_use_llm: bool
    inherited_result: Optional[UnifiedQueryResult] = None

    # Names of the escalation triggers that fired
    triggers: list[str] = field(default_factory=list)


def is_simple_greeting(query: str) -> bool:
    return bool(GREETING_PATTERN.match(query.strip()))


def is_new_topic(query: str) -> bool:
    return bool(NEW_TOPIC_PATTERN.match(query.strip()))


def is_follow_up(query: str) -> bool:
    """Continuation wording, a short non-topic-changing reply, or a leading pronoun."""
    text = query.strip()
    return bool(
        FOLLOW_UP_START_PATTERN.match(text)
        or (len(text) <= SHORT_FOLLOW_UP_LENGTH and not is_new_topic(text))
        or PRONOUN_START_PATTERN.match(text)
    )


def is_selection_response(query: str) -> bool:
    """Bare option pick such as "2", "b." or "option 3"."""
    return any_match(SELECTION_PATTERNS, query.strip())


def has_contextual_reference(query: str) -> bool:
    """Bare pronoun without an override keyword like "again" or "fix"."""
    return bool(
        CONTEXTUAL_PRONOUN_PATTERN.search(query)
        and not OVERRIDE_KEYWORD_PATTERN.search(query)
    )


def inherit_tools(
    query: str,
    tools_result: QueryIntentResult,
    model_result: ModelRoutingResult,
    previous: Optional[PreviousToolContext],
    available_tools: Sequence[Tool],
) -> Optional[UnifiedQueryResult]:
    """
    Reuse the previous turn's tools without any classifier call.

    Applies when the previous turn used tools, nothing was selected now, the
    query is not a greeting, and it either reads as a follow-up or does not
    open a new topic. Returns None when inheritance does not apply.
    """
    if not previous or not previous.last_used_tools:
        return None
    if tools_result.tools or is_simple_greeting(query):
        return None
    if not (is_follow_up(query) or not is_new_topic(query)):
        return None

    inherited = [tool for tool in previous.last_used_tools if tool in available_tools]
    if not inherited:
        return None

    logger.debug(f"Follow-up detected, inheriting {[t.value for t in inherited]}")

    return UnifiedQueryResult(
        tools=QueryIntentResult(
            tools=inherited,
            confidence=INHERITED_CONFIDENCE,
            reasoning=f"Follow-up to previous query, inheriting {', '.join(t.value for t in inherited)}",
            metadata={"inherited": True},
        ),
        model=replace(model_result, tier=model_result.tier.at_least(ModelTier.MODERATE)),
        used_llm_fallback=False,
    )


def decide_escalation(
    query: str,
    tools_result: QueryIntentResult,
    model_result: ModelRoutingResult,
    previous: Optional[PreviousToolContext],
    history: Sequence[ConversationTurn],
    available_tools: Sequence[Tool],
    has_classifier: bool,
    fallback_threshold: float = DEFAULT_FALLBACK_THRESHOLD,
    escalate_on_pronoun: bool = True,
) -> EscalationDecision:
    """
    Decide between follow-up inheritance, classifier escalation and the local result.

    Escalation needs a classifier, never fires for greetings, and requires one of:
    low confidence with no tools, a bare selection reply, a very short reply with
    history, or an unresolved pronoun with history.
    """
    inherited = inherit_tools(query, tools_result, model_result, previous, available_tools)
    if inherited is not None:
        return EscalationDecision(should_use_llm=False, inherited_result=inherited)

    no_tools = not tools_result.tools
    has_history = len(history) > 0

    triggers = []
    if tools_result.confidence < fallback_threshold and no_tools:
        triggers.append("low_confidence")
    if is_selection_response(query):
        triggers.append("selection_response")
    if len(query.strip()) <= CONTEXT_DEPENDENT_LENGTH and has_history and no_tools:
        triggers.append("needs_context")
    if escalate_on_pronoun and has_history and no_tools and has_contextual_reference(query):
        triggers.append("contextual_reference")

    should_use_llm = bool(triggers) and has_classifier and not is_simple_greeting(query)

    logger.debug(f"Escalation triggers {triggers or 'none'} -> use classifier: {should_use_llm}")

    return EscalationDecision(should_use_llm=should_use_llm, triggers=triggers)
