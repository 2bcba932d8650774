"""Tests for unified query analysis."""

from unittest.mock import AsyncMock, Mock

import pytest

from intent_router.analyzer import analyze_model_tier, analyze_query, should_use_tool
from intent_router.models import (
    ConversationTurn,
    ModelTier,
    PreviousToolContext,
    QueryContext,
    Tool,
)

ALL_TOOLS = list(Tool)

CODE_HISTORY = [
    ConversationTurn(role="user", content="Analyze my sales spreadsheet"),
    ConversationTurn(role="assistant", content="I'm executing the code now... here are the analysis results"),
]

OPTIONS_HISTORY = [
    ConversationTurn(role="user", content="Visualize my sales"),
    ConversationTurn(
        role="assistant",
        content="How would you like me to visualize this?\n1. Interactive chart\n2. Dashboard view\n3. Image chart",
    ),
]

ARTIFACTS_REPLY = '{"tools": ["artifacts"], "modelTier": "simple", "reasoning": "Option 2 is a dashboard"}'


class TestAnalyzeQuery:
    """Test the unified analysis flow."""

    @pytest.mark.asyncio
    async def test_local_result(self):
        """Test a clear query is answered locally."""
        ctx = QueryContext(
            query="What is the latest news on the stock market today?",
            available_tools=ALL_TOOLS,
        )
        classifier = AsyncMock()
        result = await analyze_query(ctx, classifier=classifier)

        assert Tool.WEB_SEARCH in result.tools.tools
        assert result.used_llm_fallback is False
        classifier.assert_not_called()

    @pytest.mark.asyncio
    async def test_deterministic(self):
        """Test identical input gives identical results without a classifier."""
        ctx = QueryContext(query="Create a chart of monthly sales", available_tools=ALL_TOOLS)
        assert await analyze_query(ctx) == await analyze_query(ctx)

    @pytest.mark.asyncio
    async def test_greeting_never_calls_classifier(self):
        """Test greetings stay local even with history."""
        classifier = AsyncMock(return_value=ARTIFACTS_REPLY)
        result = await analyze_query(
            QueryContext(query="thanks!", available_tools=ALL_TOOLS, conversation_history=OPTIONS_HISTORY),
            classifier=classifier,
        )

        classifier.assert_not_called()
        assert result.tools.tools == []
        assert result.model.tier == ModelTier.SIMPLE

    @pytest.mark.asyncio
    async def test_follow_up_inherits_tools(self):
        """Test a follow-up inherits the previous turn's tools without the classifier."""
        classifier = AsyncMock(return_value=ARTIFACTS_REPLY)
        result = await analyze_query(
            QueryContext(
                query="for March only",
                available_tools=[Tool.CODE_INTERPRETER, Tool.WEB_SEARCH],
                conversation_history=CODE_HISTORY,
            ),
            classifier=classifier,
        )

        classifier.assert_not_called()
        assert result.tools.tools == [Tool.CODE_INTERPRETER]
        assert result.tools.metadata == {"inherited": True}
        assert result.model.tier == ModelTier.MODERATE
        assert result.used_llm_fallback is False

    @pytest.mark.asyncio
    async def test_history_feeds_follow_up_signals(self):
        """Test the context extracted from history drives modification signals."""
        history = [
            ConversationTurn(role="user", content="Plot my monthly sales"),
            ConversationTurn(
                role="assistant",
                content="I'm executing the code now. Here are the analysis results and the chart.",
            ),
        ]
        classifier = AsyncMock(return_value=ARTIFACTS_REPLY)
        result = await analyze_query(
            QueryContext(
                query="now make it bigger",
                available_tools=[Tool.CODE_INTERPRETER],
                conversation_history=history,
            ),
            classifier=classifier,
        )

        classifier.assert_not_called()
        assert result.tools.tools == [Tool.CODE_INTERPRETER]
        assert result.tools.confidence == pytest.approx(0.9 * 0.85)
        reasons = result.tools.metadata["reasons"]["execute_code"]
        assert reasons[0].startswith("context_followup: Modification pattern detected")
        assert result.used_llm_fallback is False

    @pytest.mark.asyncio
    async def test_continuation_keeps_code_tool(self):
        """Test a continuation after code execution keeps the code tool locally."""
        classifier = AsyncMock(return_value=ARTIFACTS_REPLY)
        result = await analyze_query(
            QueryContext(
                query="and also check the average",
                available_tools=[Tool.CODE_INTERPRETER],
                conversation_history=CODE_HISTORY,
            ),
            classifier=classifier,
        )

        classifier.assert_not_called()
        assert Tool.CODE_INTERPRETER in result.tools.tools
        assert result.used_llm_fallback is False

    @pytest.mark.asyncio
    async def test_supplied_previous_context_wins(self):
        """Test a supplied previous tool context is used instead of history."""
        result = await analyze_query(
            QueryContext(
                query="and the other one?",
                available_tools=[Tool.CODE_INTERPRETER, Tool.WEB_SEARCH],
                conversation_history=CODE_HISTORY,
                previous_tool_context=PreviousToolContext(last_used_tools=[Tool.WEB_SEARCH]),
            ),
        )
        assert result.tools.tools == [Tool.WEB_SEARCH]

    @pytest.mark.asyncio
    async def test_selection_reply_uses_classifier(self):
        """Test a bare option pick is resolved by the classifier."""
        classifier = AsyncMock(return_value=ARTIFACTS_REPLY)
        result = await analyze_query(
            QueryContext(query="2", available_tools=ALL_TOOLS, conversation_history=OPTIONS_HISTORY),
            classifier=classifier,
        )

        classifier.assert_awaited_once()
        prompt = classifier.call_args.args[0]
        assert "2. Dashboard view" in prompt
        assert result.used_llm_fallback is True
        assert result.tools.tools == [Tool.ARTIFACTS]
        assert result.model.tier == ModelTier.MODERATE

    @pytest.mark.asyncio
    async def test_classifier_failure_degrades(self):
        """Test classifier errors fall back to the local result."""
        classifier = AsyncMock(side_effect=RuntimeError("timeout"))
        result = await analyze_query(
            QueryContext(query="2", available_tools=ALL_TOOLS, conversation_history=OPTIONS_HISTORY),
            classifier=classifier,
        )

        classifier.assert_awaited_once()
        assert result.used_llm_fallback is False
        assert result.tools.tools == []

    @pytest.mark.asyncio
    async def test_sync_classifier(self):
        """Test a plain function works as a classifier."""
        classifier = Mock(return_value=ARTIFACTS_REPLY)
        result = await analyze_query(
            QueryContext(query="2", available_tools=ALL_TOOLS, conversation_history=OPTIONS_HISTORY),
            classifier=classifier,
        )
        assert result.tools.tools == [Tool.ARTIFACTS]

    @pytest.mark.asyncio
    async def test_no_classifier_keeps_local(self):
        """Test escalation triggers without a classifier keep the local result."""
        result = await analyze_query(
            QueryContext(query="2", available_tools=ALL_TOOLS, conversation_history=OPTIONS_HISTORY)
        )
        assert result.used_llm_fallback is False

    @pytest.mark.asyncio
    async def test_keyword_fields(self):
        """Test passing context fields as keywords."""
        result = await analyze_query(
            query="What is the latest news on the stock market today?",
            available_tools=["web_search"],
        )
        assert result.tools.tools == [Tool.WEB_SEARCH]

    @pytest.mark.asyncio
    async def test_context_and_fields_conflict(self):
        """Test a context plus keyword fields is rejected."""
        with pytest.raises(TypeError):
            await analyze_query(QueryContext(query="hi"), query="hello")

    @pytest.mark.asyncio
    async def test_degenerate_input(self):
        """Test empty input returns a well-formed result."""
        result = await analyze_query(QueryContext())
        assert result.tools.tools == []
        assert result.model.tier in list(ModelTier)


class TestHelpers:
    """Test convenience helpers."""

    def test_analyze_model_tier(self):
        """Test tier-only analysis."""
        assert analyze_model_tier("Hello!").tier == ModelTier.SIMPLE

    def test_should_use_tool(self):
        """Test tool check by enum or capability name."""
        ctx = QueryContext(
            query="What is the latest news on the stock market today?",
            available_tools=ALL_TOOLS,
        )
        assert should_use_tool(Tool.WEB_SEARCH, ctx)
        assert should_use_tool("web_search", ctx)
        assert not should_use_tool(Tool.YOUTUBE_VIDEO, ctx)
