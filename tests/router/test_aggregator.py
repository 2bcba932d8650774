"""Tests for signal aggregation and tool selection."""

import pytest

from intent_router.aggregator import (
    aggregate,
    analyze_tools,
    build_clarification,
    score_query_intent,
)
from intent_router.models import QueryContext, Signal, SignalSource, Tool
from intent_router.patterns import (
    CHART_CLARIFICATION_OPTIONS,
    CHART_CLARIFICATION_PROMPT,
    MULTI_TOOL_CLARIFICATION_PROMPT,
)

ALL_TOOLS = list(Tool)


class TestAggregate:
    """Test weighted aggregation with diminishing returns."""

    def test_single_signal(self):
        """Test contribution is score times source weight."""
        scores = aggregate([Signal(Tool.WEB_SEARCH, SignalSource.REGEX_HIGH, 0.7, "a")])
        assert scores[Tool.WEB_SEARCH].score == pytest.approx(0.35)
        assert scores[Tool.WEB_SEARCH].reasons == ("regex_high: a (+0.35)",)

    def test_diminishing_returns_same_source(self):
        """Test the second signal from one source counts half."""
        scores = aggregate([
            Signal(Tool.WEB_SEARCH, SignalSource.REGEX_HIGH, 0.7, "a"),
            Signal(Tool.WEB_SEARCH, SignalSource.REGEX_HIGH, 0.7, "b"),
            Signal(Tool.WEB_SEARCH, SignalSource.REGEX_HIGH, 0.7, "c"),
        ])
        expected = 0.35 + 0.35 / 2 + 0.35 / 3
        assert scores[Tool.WEB_SEARCH].score == pytest.approx(expected)
        assert len(scores[Tool.WEB_SEARCH].reasons) == 3

    def test_no_diminishing_across_sources_or_tools(self):
        """Test diminishing applies per (tool, source) pair only."""
        scores = aggregate([
            Signal(Tool.WEB_SEARCH, SignalSource.REGEX_HIGH, 0.7),
            Signal(Tool.CODE_INTERPRETER, SignalSource.REGEX_HIGH, 0.7),
            Signal(Tool.WEB_SEARCH, SignalSource.NGRAM_MATCH, 0.7),
        ])
        assert scores[Tool.CODE_INTERPRETER].score == pytest.approx(0.35)
        assert scores[Tool.WEB_SEARCH].score == pytest.approx(0.35 + 0.42)

    def test_clamped_to_one(self):
        """Test aggregated scores are clamped to 1."""
        scores = aggregate([
            Signal(Tool.FILE_SEARCH, SignalSource.USER_SELECTED, 1.0),
            Signal(Tool.FILE_SEARCH, SignalSource.EXPLICIT_REQUEST, 0.95),
            Signal(Tool.FILE_SEARCH, SignalSource.FILE_TYPE, 0.9),
        ])
        assert scores[Tool.FILE_SEARCH].score == 1.0

    def test_empty(self):
        """Test no signals means no scores."""
        assert aggregate([]) == {}


class TestSelectTools:
    """Test selection thresholds and precedence."""

    def test_user_override_supremacy(self):
        """Test a user selection is returned alone with full confidence."""
        ctx = QueryContext(
            query="Write python code to analyze this CSV data and run this code",
            available_tools=[Tool.FILE_SEARCH, Tool.CODE_INTERPRETER],
            user_selected_tools=[Tool.FILE_SEARCH],
        )
        result = analyze_tools(ctx)

        assert result.tools == [Tool.FILE_SEARCH]
        assert result.confidence == 1.0
        assert result.clarification_prompt is None
        assert result.reasoning == "file_search explicitly selected by user"

    def test_user_selection_keeps_attachment_tools(self):
        """Test attachment tools are added next to a user selection, matched tools are not."""
        ctx = QueryContext(
            query="Search the web for the latest news today",
            available_tools=[Tool.FILE_SEARCH, Tool.CODE_INTERPRETER, Tool.WEB_SEARCH],
            user_selected_tools=[Tool.FILE_SEARCH],
            attached_files={"upload_intents": ["code_interpreter"]},
        )
        result = analyze_tools(ctx)

        assert result.tools == [Tool.FILE_SEARCH, Tool.CODE_INTERPRETER]
        assert result.confidence == 1.0
        assert result.clarification_prompt is None
        assert result.reasoning == (
            "file_search explicitly selected by user; execute_code needed for attached files"
        )

    def test_attachment_dominance(self):
        """Test attachment tools are selected with 0.9 confidence and no clarification."""
        ctx = QueryContext(
            query="Hello there",
            available_tools=[Tool.CODE_INTERPRETER, Tool.FILE_SEARCH],
            attached_files={"upload_intents": ["code_interpreter"]},
        )
        result = analyze_tools(ctx)

        assert Tool.CODE_INTERPRETER in result.tools
        assert result.confidence >= 0.9
        assert result.clarification_prompt is None
        assert "execute_code needed for attached files" in result.reasoning

    def test_no_intent(self):
        """Test a neutral query selects nothing with floor confidence."""
        ctx = QueryContext(query="Tell me about your day", available_tools=ALL_TOOLS)
        result = analyze_tools(ctx)

        assert result.tools == []
        assert result.confidence == pytest.approx(0.3)
        assert result.reasoning == "No specific tool intent detected"

    def test_medium_threshold_match(self):
        """Test a strong web search query is selected."""
        ctx = QueryContext(
            query="What is the latest news on the stock market today?",
            available_tools=[Tool.WEB_SEARCH],
        )
        result = analyze_tools(ctx)

        assert result.tools == [Tool.WEB_SEARCH]
        assert result.confidence >= 0.5
        assert result.reasoning.startswith("web_search matched (score:")

    def test_auto_enabled_low_threshold(self):
        """Test auto-enabled tools only need the low threshold."""
        query = "any recent developments?"
        plain = analyze_tools(QueryContext(query=query, available_tools=[Tool.WEB_SEARCH]))
        auto = analyze_tools(QueryContext(
            query=query,
            available_tools=[Tool.WEB_SEARCH],
            auto_enabled_tools=[Tool.WEB_SEARCH],
        ))

        assert plain.tools == []
        assert auto.tools == [Tool.WEB_SEARCH]
        assert "auto-enabled" in auto.reasoning

    def test_no_duplicates(self):
        """Test overlapping sources never duplicate a tool."""
        ctx = QueryContext(
            query="Analyze this CSV data with pandas",
            available_tools=[Tool.CODE_INTERPRETER, Tool.CODE_INTERPRETER, Tool.FILE_SEARCH],
            auto_enabled_tools=[Tool.CODE_INTERPRETER],
            attached_files={"upload_intents": ["code_interpreter", "code_interpreter"]},
        )
        result = analyze_tools(ctx)
        assert len(result.tools) == len(set(result.tools))

    def test_metadata_scores_bounded(self):
        """Test diagnostic scores lie in [0, 1]."""
        ctx = QueryContext(
            query="Search the web for the latest news, run this code and build a dashboard chart",
            available_tools=ALL_TOOLS,
        )
        result = analyze_tools(ctx)

        assert result.metadata["signal_count"] > 0
        for score in result.metadata["scores"].values():
            assert 0.0 <= score <= 1.0
        assert 0.0 <= result.confidence <= 1.0


class TestClarification:
    """Test clarification prompts."""

    def test_chart_special_case(self):
        """Test chart requests with artifacts available offer rendering options."""
        ctx = QueryContext(
            query="Create a chart of monthly sales",
            available_tools=[Tool.CODE_INTERPRETER, Tool.ARTIFACTS],
        )
        result = analyze_tools(ctx)

        assert Tool.CODE_INTERPRETER in result.tools
        assert result.clarification_prompt == CHART_CLARIFICATION_PROMPT
        assert result.clarification_options == list(CHART_CLARIFICATION_OPTIONS)

    def test_multi_tool(self):
        """Test two unrelated tools produce a generic prompt with tool list intact."""
        ctx = QueryContext(
            query="Search the web for news and create a dashboard",
            available_tools=[Tool.WEB_SEARCH, Tool.ARTIFACTS],
        )
        result = analyze_tools(ctx)

        assert set(result.tools) == {Tool.WEB_SEARCH, Tool.ARTIFACTS}
        assert result.clarification_prompt == MULTI_TOOL_CLARIFICATION_PROMPT
        assert len(result.clarification_options) == 3
        assert result.clarification_options[-1] == "Use all of them"

    def test_options_capped(self):
        """Test at most three tool options plus 'Use all of them'."""
        selected = [Tool.WEB_SEARCH, Tool.FILE_SEARCH, Tool.YOUTUBE_VIDEO, Tool.ARTIFACTS]
        prompt, options = build_clarification("do everything", selected, 0.8, selected)

        assert prompt == MULTI_TOOL_CLARIFICATION_PROMPT
        assert options == [
            "Use web search",
            "Use document search",
            "Use YouTube video",
            "Use all of them",
        ]

    def test_low_confidence_or_single_tool(self):
        """Test no prompt below 0.4 confidence or with one tool."""
        two = [Tool.WEB_SEARCH, Tool.FILE_SEARCH]
        assert build_clarification("do things", two, 0.35, two) is None
        assert build_clarification("do things", [Tool.WEB_SEARCH], 0.9, two) is None

    def test_attachments_suppress(self):
        """Test attachment-driven selections never ask."""
        two = [Tool.CODE_INTERPRETER, Tool.FILE_SEARCH]
        assert build_clarification("plot a chart", two, 0.9, two + [Tool.ARTIFACTS], 1) is None


class TestScoreQueryIntent:
    """Test diagnostic regex-only scoring."""

    def test_bounded(self):
        """Test score lies in (0, 1] for a matching query."""
        score = score_query_intent("Search the web for the latest news today", Tool.WEB_SEARCH)
        assert 0.0 < score <= 1.0

    def test_single_low_match(self):
        """Test one low-tier match contributes 0.1."""
        assert score_query_intent("a watch", Tool.YOUTUBE_VIDEO) == pytest.approx(0.1)

    def test_no_match(self):
        """Test a neutral query scores 0."""
        assert score_query_intent("hello", Tool.YOUTUBE_VIDEO) == 0.0

    def test_web_search_suppression(self):
        """Test the attached-document suppression rule."""
        query = "What does the document say about the latest prices?"
        assert score_query_intent(query, Tool.WEB_SEARCH, has_attachments=True) == 0.0
        assert score_query_intent(query, Tool.WEB_SEARCH, has_attachments=False) > 0.0
