"""Tests for previous-turn tool extraction."""

from intent_router.history import (
    detect_output_type,
    detect_tools_in_text,
    extract_previous_tool_context,
)
from intent_router.models import ConversationTurn, OutputType, Tool


class TestDetection:
    """Test assistant-text detection."""

    def test_detect_tools(self):
        """Test tool usage wording in assistant text."""
        assert detect_tools_in_text("Here are the search results for your query") == [Tool.WEB_SEARCH]
        assert detect_tools_in_text("According to the document, the fee is $20") == [Tool.FILE_SEARCH]
        assert Tool.YOUTUBE_VIDEO in detect_tools_in_text("The video transcript covers three topics")

    def test_output_type_first_match_wins(self):
        """Test output types are checked in enum order."""
        assert detect_output_type("Here's the chart and the code behind it") == OutputType.CHART
        assert detect_output_type("I wrote a function for you") == OutputType.CODE
        assert detect_output_type("Nothing special here") is None


class TestExtractPreviousToolContext:
    """Test extraction from conversation history."""

    def test_code_execution(self):
        """Test executed code is detected from the last assistant turn."""
        history = [
            {"role": "user", "content": "Load sales.csv"},
            {"role": "assistant", "content": "I'm executing the code now... here are the analysis results"},
        ]
        context = extract_previous_tool_context(history)

        assert context is not None
        assert context.last_used_tools == [Tool.CODE_INTERPRETER]
        assert context.last_output_type == OutputType.CODE
        assert context.last_tool_success is True

    def test_only_last_assistant_message(self):
        """Test earlier assistant turns are ignored."""
        history = [
            ConversationTurn(role="assistant", content="Here are the search results"),
            ConversationTurn(role="user", content="ok"),
            ConversationTurn(role="assistant", content="Hello again, happy to help"),
        ]
        assert extract_previous_tool_context(history) is None

    def test_no_assistant_turn(self):
        """Test histories without assistant turns."""
        assert extract_previous_tool_context([]) is None
        assert extract_previous_tool_context(None) is None
        assert extract_previous_tool_context([{"role": "user", "content": "Run the code"}]) is None

    def test_output_type_without_tool(self):
        """Test an output type alone still yields a context."""
        history = [{"role": "assistant", "content": "Here is the report you asked for"}]
        context = extract_previous_tool_context(history)

        assert context is not None
        assert context.last_used_tools == []
        assert context.last_output_type == OutputType.DOCUMENT
