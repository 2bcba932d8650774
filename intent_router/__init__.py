"""
Intent and tier router for chat requests.

Picks the tools a query may use and the model tier that should answer it:
1. Local signal scoring (user selection, attachments, follow-ups, phrases, regex)
2. Complexity scoring for the model tier
3. Optional injected classifier when local signals are ambiguous
"""

__version__ = "0.1.0"

from .aggregator import analyze_tools, score_query_intent
from .analyzer import analyze_model_tier, analyze_query, should_use_tool
from .complexity import score_query_complexity
from .config.schema import RouterConfig, RouterSettings
from .history import extract_previous_tool_context
from .llm_router import LLMClassifier, classify_with_llm
from .models import (
    AttachedFileContext,
    ClassifierReply,
    ConversationTurn,
    FileInfo,
    ModelRoutingResult,
    ModelTier,
    PreviousToolContext,
    QueryContext,
    QueryIntentResult,
    Tool,
    UnifiedQueryResult,
    UploadIntent,
)
from .presets import get_model_for_tier
from .router import UniversalRoutingResult, route_query, route_to_model

__all__ = [
    "__version__",
    "analyze_query",
    "analyze_tools",
    "analyze_model_tier",
    "should_use_tool",
    "score_query_intent",
    "score_query_complexity",
    "extract_previous_tool_context",
    "classify_with_llm",
    "LLMClassifier",
    "route_query",
    "route_to_model",
    "get_model_for_tier",
    "RouterConfig",
    "RouterSettings",
    "UniversalRoutingResult",
    "AttachedFileContext",
    "ClassifierReply",
    "ConversationTurn",
    "FileInfo",
    "ModelRoutingResult",
    "ModelTier",
    "PreviousToolContext",
    "QueryContext",
    "QueryIntentResult",
    "Tool",
    "UnifiedQueryResult",
    "UploadIntent",
]
