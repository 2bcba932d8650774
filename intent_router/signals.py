"""Signal collection: turn one query plus context into typed evidence records."""

from typing import Optional

from .models import (
    AttachedFileContext,
    PreviousToolContext,
    QueryContext,
    Signal,
    SignalSource,
    Tool,
    UploadIntent,
)
from .patterns import (
    DOCUMENT_REFERENCE_PATTERNS,
    EXPLICIT_TOOL_REQUESTS,
    FOLLOWUP_PATTERNS,
    MODIFICATION_PATTERNS,
    NGRAM_PHRASES,
    OUTPUT_TYPE_TO_TOOL,
    QUERY_PATTERNS,
    REFERENCE_PATTERNS,
    REGEX_TIERS,
    SCORE_EXPLICIT_REQUEST,
    SCORE_FILE_TYPE,
    SCORE_FOLLOWUP,
    SCORE_MODIFICATION,
    SCORE_NGRAM,
    SCORE_REFERENCE_MATCHED,
    SCORE_REFERENCE_UNMATCHED,
    SCORE_REGEX,
    SCORE_USER_SELECTED,
    any_match,
    normalize_for_ngram,
)


_UPLOAD_INTENT_TOOLS = {
    UploadIntent.FILE_SEARCH: Tool.FILE_SEARCH,
    UploadIntent.CODE_INTERPRETER: Tool.CODE_INTERPRETER,
    # Images need no tool; vision is part of the model
}

_REGEX_SOURCES = {
    "high": SignalSource.REGEX_HIGH,
    "medium": SignalSource.REGEX_MEDIUM,
    "low": SignalSource.REGEX_LOW,
}


def _snippet(query: str) -> str:
    return f'"{query[:30]}..."'


def tools_from_attachments(attached_files: Optional[AttachedFileContext]) -> list[Tool]:
    """Tools required by the upload intents of attached files, de-duplicated."""
    if not attached_files:
        return []

    tools: list[Tool] = []
    for intent in attached_files.upload_intents:
        tool = _UPLOAD_INTENT_TOOLS.get(intent)
        if tool is not None and tool not in tools:
            tools.append(tool)
    return tools


def references_documents(query: str) -> bool:
    """Check whether the query talks about the user's own files."""
    return any_match(DOCUMENT_REFERENCE_PATTERNS, query)


def detect_explicit_tool_requests(query: str) -> list[Tool]:
    """Tools the query asks for by name ("use web search", "run this code")."""
    return [tool for tool, patterns in EXPLICIT_TOOL_REQUESTS.items() if any_match(patterns, query)]


def detect_followup_signals(
    query: str,
    previous: Optional[PreviousToolContext],
) -> list[Signal]:
    """
    Emit one context_followup signal per previously used tool.

    Modification wording ("change the color", "make it bigger") outranks plain
    continuation ("now do the same for..."); when both match, the higher score wins.
    """
    if not previous or not previous.last_used_tools:
        return []

    if any_match(MODIFICATION_PATTERNS, query):
        score, label = SCORE_MODIFICATION, "Modification"
    elif any_match(FOLLOWUP_PATTERNS, query):
        score, label = SCORE_FOLLOWUP, "Follow-up"
    else:
        return []

    reason = f"{label} pattern detected: {_snippet(query)}"
    return [
        Signal(tool=tool, source=SignalSource.CONTEXT_FOLLOWUP, score=score, reason=reason)
        for tool in previous.last_used_tools
    ]


def detect_reference_signals(
    query: str,
    previous: Optional[PreviousToolContext],
) -> list[Signal]:
    """Emit context_reference signals for mentions of a prior output ("the chart")."""
    last_output = previous.last_output_type if previous else None
    signals = []
    for output_type, patterns in REFERENCE_PATTERNS.items():
        if not any_match(patterns, query):
            continue
        score = SCORE_REFERENCE_MATCHED if last_output == output_type else SCORE_REFERENCE_UNMATCHED
        signals.append(Signal(
            tool=OUTPUT_TYPE_TO_TOOL[output_type],
            source=SignalSource.CONTEXT_REFERENCE,
            score=score,
            reason=f"References {output_type.value}: {_snippet(query)}",
        ))
    return signals


def match_ngram_phrases(query: str) -> list[Signal]:
    """First literal phrase hit per tool, after normalization."""
    normalized = normalize_for_ngram(query)
    signals = []
    for tool, phrases in NGRAM_PHRASES.items():
        for phrase in phrases:
            if normalize_for_ngram(phrase) in normalized:
                signals.append(Signal(
                    tool=tool,
                    source=SignalSource.NGRAM_MATCH,
                    score=SCORE_NGRAM,
                    reason=f'Matched phrase: "{phrase}"',
                ))
                break
    return signals


def regex_signals(
    query: str,
    tool: Tool,
    has_attachments: bool = False,
    refers_to_documents: bool = False,
) -> list[Signal]:
    """At most one signal per confidence tier for ``tool``."""
    # With files attached, "the document" means the user's file, not the web
    if tool == Tool.WEB_SEARCH and has_attachments and refers_to_documents:
        return []

    tiers = QUERY_PATTERNS.get(tool)
    if not tiers:
        return []

    signals = []
    for tier in REGEX_TIERS:
        if any_match(tiers[tier], query):
            signals.append(Signal(
                tool=tool,
                source=_REGEX_SOURCES[tier],
                score=SCORE_REGEX[tier],
                reason=f"{tier.capitalize()}-confidence pattern match",
            ))
    return signals


def collect_signals(query: str, context: QueryContext) -> list[Signal]:
    """
    Collect every signal for a query, strongest sources first.

    Args:
        query: Raw query text.
        context: Caller context (available, selected tools, attachments, history).

    Returns:
        Flat list of signals. Pure function of its inputs.
    """
    available = context.available_tools
    attachment_tools = tools_from_attachments(context.attached_files)
    has_attachments = bool(attachment_tools)
    refers_to_documents = references_documents(query)
    previous = context.previous_tool_context

    signals: list[Signal] = []

    # 1. User selected tools
    for tool in context.user_selected_tools:
        if tool in available:
            signals.append(Signal(
                tool=tool,
                source=SignalSource.USER_SELECTED,
                score=SCORE_USER_SELECTED,
                reason="Explicitly selected by user",
            ))

    # 2. Explicit requests in the query text
    for tool in detect_explicit_tool_requests(query):
        if tool in available:
            signals.append(Signal(
                tool=tool,
                source=SignalSource.EXPLICIT_REQUEST,
                score=SCORE_EXPLICIT_REQUEST,
                reason="Explicitly requested in query",
            ))

    # 3. Attached file types
    for tool in attachment_tools:
        signals.append(Signal(
            tool=tool,
            source=SignalSource.FILE_TYPE,
            score=SCORE_FILE_TYPE,
            reason="Required for attached file type",
        ))

    # 4-6. Conversation context and literal phrases
    for signal in (
        detect_followup_signals(query, previous)
        + detect_reference_signals(query, previous)
        + match_ngram_phrases(query)
    ):
        if signal.tool in available:
            signals.append(signal)

    # 7. Tiered regex patterns
    for tool in available:
        signals.extend(regex_signals(query, tool, has_attachments, refers_to_documents))

    return signals
