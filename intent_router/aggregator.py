"""Weighted signal aggregation, tool selection and clarification prompts."""

from dataclasses import replace
from functools import reduce
from typing import Mapping, Optional

from loguru import logger

from .models import (
    QueryContext,
    QueryIntentResult,
    Signal,
    Tool,
    ToolScoreEntry,
    tool_to_capability,
)
from .patterns import (
    CHART_CLARIFICATION_OPTIONS,
    CHART_CLARIFICATION_PROMPT,
    CHART_VISUALIZATION_PATTERNS,
    CLARIFICATION_MIN_CONFIDENCE,
    CLARIFICATION_TOOL_NAMES,
    CONFIDENCE_FLOOR,
    DIAGNOSTIC_REGEX_WEIGHTS,
    MULTI_TOOL_CLARIFICATION_PROMPT,
    QUERY_PATTERNS,
    REGEX_TIERS,
    THRESHOLD_LOW,
    THRESHOLD_MEDIUM,
    any_match,
)
from .signals import collect_signals, references_documents, tools_from_attachments


ToolScores = Mapping[Tool, ToolScoreEntry]

MAX_CLARIFICATION_TOOLS = 3


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _accumulate(scores: ToolScores, signal: Signal) -> ToolScores:
    """Fold one signal into the per-tool accumulator without mutating it."""
    current = scores.get(signal.tool, ToolScoreEntry())
    # Repeated evidence from one source counts 1, 1/2, 1/3, ...
    diminishing = 1.0 / (1 + current.sources.count(signal.source))
    contribution = signal.score * signal.source.weight * diminishing
    entry = ToolScoreEntry(
        score=current.score + contribution,
        reasons=current.reasons + (
            f"{signal.source.value}: {signal.reason or 'matched'} (+{contribution:.2f})",
        ),
        sources=current.sources + (signal.source,),
    )
    return {**scores, signal.tool: entry}


def aggregate(signals: list[Signal]) -> dict[Tool, ToolScoreEntry]:
    """
    Combine signals into one clamped score per tool.

    Each contribution is ``score * source_weight / (1 + prior signals from the
    same source for that tool)``.
    """
    folded = reduce(_accumulate, signals, {})
    return {tool: replace(entry, score=_clamp(entry.score)) for tool, entry in folded.items()}


def _score_of(scores: ToolScores, tool: Tool) -> float:
    entry = scores.get(tool)
    return entry.score if entry else 0.0


def is_chart_related(query: str) -> bool:
    return any_match(CHART_VISUALIZATION_PATTERNS, query)


def build_clarification(
    query: str,
    selected: list[Tool],
    confidence: float,
    available: list[Tool],
    attachment_tool_count: int = 0,
) -> Optional[tuple[str, list[str]]]:
    """
    Suggest a multiple-choice prompt when the selection is ambiguous.

    Returns ``(prompt, options)`` or None. Attachment-driven selections never ask.
    """
    if attachment_tool_count > 0:
        return None

    # Charts can come from code execution (static image) or artifacts (interactive)
    if (
        Tool.CODE_INTERPRETER in selected
        and Tool.ARTIFACTS in available
        and is_chart_related(query)
    ):
        return CHART_CLARIFICATION_PROMPT, list(CHART_CLARIFICATION_OPTIONS)

    if len(selected) < 2 or confidence < CLARIFICATION_MIN_CONFIDENCE:
        return None

    options = [
        f"Use {CLARIFICATION_TOOL_NAMES.get(tool, tool.value)}"
        for tool in selected[:MAX_CLARIFICATION_TOOLS]
    ]
    options.append("Use all of them")
    return MULTI_TOOL_CLARIFICATION_PROMPT, options


def select_tools(
    query: str,
    context: QueryContext,
    scores: ToolScores,
    attachment_tools: list[Tool],
) -> QueryIntentResult:
    """
    Apply selection thresholds to aggregated scores.

    Order: user selection, attachment tools, auto-enabled tools at the low
    threshold, then everything else by descending score at the medium threshold.
    A non-empty user selection replaces the auto-enabled and matched steps;
    attachment tools are always added.
    """
    available = context.available_tools
    selected: list[Tool] = []
    reasoning: list[str] = []

    user_selected = [t for t in context.user_selected_tools if t in available]
    for tool in user_selected:
        if tool not in selected:
            selected.append(tool)
            reasoning.append(f"{tool_to_capability(tool)} explicitly selected by user")

    for tool in attachment_tools:
        if tool in available and tool not in selected:
            selected.append(tool)
            reasoning.append(f"{tool_to_capability(tool)} needed for attached files")

    if user_selected:
        return QueryIntentResult(
            tools=selected,
            confidence=1.0,
            reasoning="; ".join(reasoning),
        )

    for tool in context.auto_enabled_tools:
        if tool in selected or tool not in available:
            continue
        score = _score_of(scores, tool)
        if score >= THRESHOLD_LOW:
            selected.append(tool)
            reasoning.append(f"{tool_to_capability(tool)} auto-enabled (score: {score:.2f})")

    remaining = sorted(
        (
            tool for tool in scores
            if tool not in selected
            and tool not in context.auto_enabled_tools
            and tool in available
        ),
        key=lambda t: scores[t].score,
        reverse=True,
    )
    for tool in remaining:
        score = scores[tool].score
        if score >= THRESHOLD_MEDIUM:
            selected.append(tool)
            reasoning.append(f"{tool_to_capability(tool)} matched (score: {score:.2f})")

    best = max((_score_of(scores, t) for t in selected), default=0.0)
    confidence = max(
        0.9 if attachment_tools else 0.0,
        best,
        CONFIDENCE_FLOOR,
    )

    clarification = build_clarification(
        query, selected, confidence, available, len(attachment_tools)
    )

    return QueryIntentResult(
        tools=selected,
        confidence=_clamp(confidence),
        reasoning="; ".join(reasoning) if reasoning else "No specific tool intent detected",
        clarification_prompt=clarification[0] if clarification else None,
        clarification_options=clarification[1] if clarification else None,
    )


def analyze_tools(context: QueryContext) -> QueryIntentResult:
    """
    Decide which tools a query should use.

    Collects signals, aggregates them and applies the selection thresholds.
    Aggregated scores are attached as ``metadata["scores"]`` for diagnostics.
    """
    query = context.query
    attachment_tools = tools_from_attachments(context.attached_files)
    signals = collect_signals(query, context)
    scores = aggregate(signals)

    logger.debug(
        f"Collected {len(signals)} signals for '{query[:80]}': "
        + ", ".join(f"{t.value}={e.score:.2f}" for t, e in scores.items())
    )

    result = select_tools(query, context, scores, attachment_tools)
    result.metadata = {
        "scores": {tool.value: round(entry.score, 4) for tool, entry in scores.items()},
        "reasons": {tool.value: list(entry.reasons) for tool, entry in scores.items()},
        "signal_count": len(signals),
    }

    logger.debug(
        f"Selected tools [{', '.join(t.value for t in result.tools) or 'none'}] "
        f"confidence={result.confidence:.2f}"
    )
    return result


def score_query_intent(
    query: str,
    tool: Tool,
    has_attachments: bool = False,
    refers_to_documents: Optional[bool] = None,
) -> float:
    """
    Diagnostic regex-only score for one tool.

    Every matching pattern counts (0.4 high, 0.25 medium, 0.1 low), capped at 1.
    """
    if refers_to_documents is None:
        refers_to_documents = references_documents(query)
    if tool == Tool.WEB_SEARCH and has_attachments and refers_to_documents:
        return 0.0

    tiers = QUERY_PATTERNS.get(tool)
    if not tiers:
        return 0.0

    score = 0.0
    for tier in REGEX_TIERS:
        for pattern in tiers[tier]:
            if pattern.search(query):
                score += DIAGNOSTIC_REGEX_WEIGHTS[tier]
    return min(score, 1.0)
