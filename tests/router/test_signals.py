"""Tests for signal collection."""

import pytest

from intent_router.models import (
    AttachedFileContext,
    OutputType,
    PreviousToolContext,
    QueryContext,
    SignalSource,
    Tool,
    UploadIntent,
)
from intent_router.patterns import normalize_for_ngram
from intent_router.signals import (
    collect_signals,
    detect_explicit_tool_requests,
    detect_followup_signals,
    detect_reference_signals,
    match_ngram_phrases,
    references_documents,
    regex_signals,
    tools_from_attachments,
)

ALL_TOOLS = list(Tool)


class TestAttachments:
    """Test attachment-derived tools."""

    def test_upload_intents_map_to_tools(self):
        """Test intents map to tools, images add none and duplicates collapse."""
        files = AttachedFileContext(upload_intents=[
            UploadIntent.IMAGE,
            UploadIntent.FILE_SEARCH,
            UploadIntent.FILE_SEARCH,
            UploadIntent.CODE_INTERPRETER,
        ])
        assert tools_from_attachments(files) == [Tool.FILE_SEARCH, Tool.CODE_INTERPRETER]

    def test_no_attachments(self):
        """Test missing attachments yield no tools."""
        assert tools_from_attachments(None) == []
        assert tools_from_attachments(AttachedFileContext()) == []


class TestExplicitRequests:
    """Test explicit in-text tool requests."""

    def test_search_the_web(self):
        """Test 'search the web for' is an explicit web search request."""
        assert Tool.WEB_SEARCH in detect_explicit_tool_requests("Please search the web for Python tutorials")

    def test_run_this_code(self):
        """Test 'run this code' requests code execution."""
        assert Tool.CODE_INTERPRETER in detect_explicit_tool_requests("run this code for me")

    def test_youtube_link(self):
        """Test a YouTube link requests the video tool."""
        tools = detect_explicit_tool_requests("https://www.youtube.com/watch?v=abc123")
        assert Tool.YOUTUBE_VIDEO in tools

    def test_plain_question(self):
        """Test a plain question has no explicit request."""
        assert detect_explicit_tool_requests("How are you today?") == []


class TestFollowupSignals:
    """Test follow-up and modification detection."""

    def test_modification_scores_higher(self):
        """Test modification wording emits 0.9 per previous tool."""
        previous = PreviousToolContext(last_used_tools=[Tool.CODE_INTERPRETER])
        signals = detect_followup_signals("change the color to blue", previous)

        assert len(signals) == 1
        assert signals[0].tool == Tool.CODE_INTERPRETER
        assert signals[0].source == SignalSource.CONTEXT_FOLLOWUP
        assert signals[0].score == pytest.approx(0.9)

    def test_continuation(self):
        """Test continuation wording emits 0.8 for every previous tool."""
        previous = PreviousToolContext(last_used_tools=[Tool.CODE_INTERPRETER, Tool.WEB_SEARCH])
        signals = detect_followup_signals("now do the same for March", previous)

        assert [s.tool for s in signals] == [Tool.CODE_INTERPRETER, Tool.WEB_SEARCH]
        assert all(s.score == pytest.approx(0.8) for s in signals)
        assert signals[0].reason.startswith("Follow-up pattern detected")

    def test_requires_previous_tools(self):
        """Test no signals without previous tool usage."""
        assert detect_followup_signals("now do the same for March", None) == []
        assert detect_followup_signals("now do it", PreviousToolContext()) == []


class TestReferenceSignals:
    """Test output-type reference detection."""

    def test_matching_output_type(self):
        """Test a reference to the previous output type scores 0.8."""
        previous = PreviousToolContext(
            last_used_tools=[Tool.CODE_INTERPRETER],
            last_output_type=OutputType.CHART,
        )
        signals = detect_reference_signals("make the chart bigger", previous)

        assert len(signals) == 1
        assert signals[0].tool == Tool.CODE_INTERPRETER
        assert signals[0].source == SignalSource.CONTEXT_REFERENCE
        assert signals[0].score == pytest.approx(0.8)
        assert signals[0].reason.startswith("References chart:")

    def test_unmatched_output_type(self):
        """Test a reference without matching history scores 0.5."""
        signals = detect_reference_signals("make the chart bigger", None)
        assert [s.score for s in signals] == [pytest.approx(0.5)]


class TestNgramPhrases:
    """Test literal phrase matching."""

    def test_normalization(self):
        """Test lowercase, punctuation stripping and whitespace collapsing."""
        assert normalize_for_ngram("What's the   WEATHER, in Paris?!") == "what's the weather in paris"

    def test_first_phrase_per_tool(self):
        """Test one signal per tool with score 0.7."""
        signals = match_ngram_phrases("Can you create a dashboard for sales? Create a dashboard!")
        artifact_signals = [s for s in signals if s.tool == Tool.ARTIFACTS]

        assert len(artifact_signals) == 1
        assert artifact_signals[0].score == pytest.approx(0.7)
        assert artifact_signals[0].source == SignalSource.NGRAM_MATCH


class TestRegexSignals:
    """Test tiered regex signals."""

    def test_one_signal_per_tier(self):
        """Test at most one signal per confidence tier."""
        signals = regex_signals("Analyze this CSV data with pandas and matplotlib", Tool.CODE_INTERPRETER)
        sources = [s.source for s in signals]

        assert SignalSource.REGEX_HIGH in sources
        assert len(sources) == len(set(sources))

    def test_tier_scores(self):
        """Test tier raw scores are 0.7/0.5/0.3."""
        signals = regex_signals("What is the latest news on the stock market today?", Tool.WEB_SEARCH)
        by_source = {s.source: s.score for s in signals}

        assert by_source[SignalSource.REGEX_HIGH] == pytest.approx(0.7)
        assert by_source[SignalSource.REGEX_MEDIUM] == pytest.approx(0.5)
        assert by_source[SignalSource.REGEX_LOW] == pytest.approx(0.3)

    def test_web_search_suppressed_for_attached_documents(self):
        """Test web search is suppressed when the query is about attached files."""
        query = "What does the document say about pricing today?"
        assert references_documents(query)
        assert regex_signals(query, Tool.WEB_SEARCH, has_attachments=True, refers_to_documents=True) == []
        assert regex_signals(query, Tool.WEB_SEARCH, has_attachments=False, refers_to_documents=True) != []

    def test_suppression_only_for_web_search(self):
        """Test suppression does not apply to other tools."""
        query = "Summarize the document"
        signals = regex_signals(query, Tool.FILE_SEARCH, has_attachments=True, refers_to_documents=True)
        assert signals != []


class TestCollectSignals:
    """Test full signal collection."""

    def test_user_selection_restricted_to_available(self):
        """Test user-selected tools outside the available set emit nothing."""
        ctx = QueryContext(
            query="hello",
            available_tools=[Tool.WEB_SEARCH],
            user_selected_tools=[Tool.ARTIFACTS],
        )
        signals = collect_signals(ctx.query, ctx)
        assert not any(s.source == SignalSource.USER_SELECTED for s in signals)

    def test_user_selection_signal(self):
        """Test available user-selected tools emit a 1.0 signal."""
        ctx = QueryContext(
            query="hello",
            available_tools=[Tool.FILE_SEARCH],
            user_selected_tools=[Tool.FILE_SEARCH],
        )
        signals = collect_signals(ctx.query, ctx)
        assert signals[0].source == SignalSource.USER_SELECTED
        assert signals[0].score == 1.0

    def test_attachment_signals(self):
        """Test attachment tools emit file_type signals."""
        ctx = QueryContext(
            query="hello",
            available_tools=[Tool.CODE_INTERPRETER],
            attached_files={"upload_intents": ["code_interpreter"]},
        )
        signals = collect_signals(ctx.query, ctx)
        file_signals = [s for s in signals if s.source == SignalSource.FILE_TYPE]

        assert [s.tool for s in file_signals] == [Tool.CODE_INTERPRETER]
        assert file_signals[0].score == pytest.approx(0.9)

    def test_context_signals_filtered_to_available(self):
        """Test n-gram and regex signals only cover available tools."""
        ctx = QueryContext(query="Create a dashboard for our sales data", available_tools=[Tool.WEB_SEARCH])
        signals = collect_signals(ctx.query, ctx)
        assert all(s.tool == Tool.WEB_SEARCH for s in signals)

    def test_scores_in_unit_interval(self):
        """Test every raw signal score lies in [0, 1]."""
        ctx = QueryContext(
            query="Search the web for the latest news and create a dashboard with a chart",
            available_tools=ALL_TOOLS,
            user_selected_tools=[Tool.WEB_SEARCH],
            attached_files={"upload_intents": ["file_search"]},
            previous_tool_context=PreviousToolContext(
                last_used_tools=[Tool.ARTIFACTS],
                last_output_type=OutputType.UI_COMPONENT,
            ),
        )
        for signal in collect_signals(ctx.query, ctx):
            assert 0.0 <= signal.score <= 1.0
