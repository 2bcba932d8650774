"""Detect which tools the previous assistant turn used."""

from typing import Optional, Sequence

from .models import (
    ConversationTurn,
    OutputType,
    PreviousToolContext,
    Tool,
    coerce_history,
)
from .patterns import OUTPUT_DETECTION_PATTERNS, TOOL_DETECTION_PATTERNS, any_match


def last_assistant_message(history: Sequence[ConversationTurn]) -> Optional[str]:
    for turn in reversed(history):
        if turn.role == "assistant":
            return turn.content
    return None


def detect_tools_in_text(text: str) -> list[Tool]:
    """Tools whose usage wording appears in assistant text ("search results", ...)."""
    return [tool for tool, patterns in TOOL_DETECTION_PATTERNS.items() if any_match(patterns, text)]


def detect_output_type(text: str) -> Optional[OutputType]:
    """First output type, in enum order, whose wording appears in the text."""
    for output_type, patterns in OUTPUT_DETECTION_PATTERNS.items():
        if any_match(patterns, text):
            return output_type
    return None


def extract_previous_tool_context(history) -> Optional[PreviousToolContext]:
    """
    Build a PreviousToolContext from the last assistant message only.

    Args:
        history: Ordered turns, as ConversationTurn objects or ``{role, content}`` dicts.

    Returns:
        The detected context, or None when nothing was recognized.
    """
    turns = coerce_history(history)
    content = last_assistant_message(turns)
    if not content:
        return None

    tools = detect_tools_in_text(content)
    output_type = detect_output_type(content)
    if not tools and output_type is None:
        return None

    # A reply exists, so the tool call is assumed to have succeeded
    return PreviousToolContext(
        last_used_tools=tools,
        last_output_type=output_type,
        last_tool_success=True,
    )
