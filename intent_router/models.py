"""Data models for the intent and tier router."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Tool(str, Enum):
    """Capabilities the router may enable for a turn.

    Values are the capability names the chat host uses.
    """
    FILE_SEARCH = "file_search"
    CODE_INTERPRETER = "execute_code"
    ARTIFACTS = "artifacts"
    WEB_SEARCH = "web_search"
    YOUTUBE_VIDEO = "youtube_video"

    @classmethod
    def parse(cls, value: Any) -> Optional["Tool"]:
        """Coerce a Tool, capability name or enum name into a Tool (None if unknown)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for tool in cls:
            if key in (tool.value, tool.name.lower()):
                return tool
        return None


class SignalSource(str, Enum):
    """Detection method that produced a signal."""
    USER_SELECTED = "user_selected"
    EXPLICIT_REQUEST = "explicit_request"
    FILE_TYPE = "file_type"
    CONTEXT_FOLLOWUP = "context_followup"
    CONTEXT_REFERENCE = "context_reference"
    NGRAM_MATCH = "ngram_match"
    REGEX_HIGH = "regex_high"
    REGEX_MEDIUM = "regex_medium"
    REGEX_LOW = "regex_low"

    @property
    def weight(self) -> float:
        return SIGNAL_WEIGHTS[self]


# Fixed per-source weights, strongest first
SIGNAL_WEIGHTS: dict[SignalSource, float] = {
    SignalSource.USER_SELECTED: 1.0,
    SignalSource.EXPLICIT_REQUEST: 0.95,
    SignalSource.FILE_TYPE: 0.9,
    SignalSource.CONTEXT_FOLLOWUP: 0.85,
    SignalSource.CONTEXT_REFERENCE: 0.75,
    SignalSource.NGRAM_MATCH: 0.6,
    SignalSource.REGEX_HIGH: 0.5,
    SignalSource.REGEX_MEDIUM: 0.35,
    SignalSource.REGEX_LOW: 0.15,
}


class ModelTier(str, Enum):
    """Cost/quality bands, ordered simple < moderate < complex < expert."""
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    # Ordering must follow rank, not the string value
    def __lt__(self, other):
        if not isinstance(other, ModelTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, ModelTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, ModelTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, ModelTier):
            return NotImplemented
        return self.rank >= other.rank

    def at_least(self, floor: "ModelTier") -> "ModelTier":
        """Raise this tier to ``floor`` if it is lower."""
        return floor if self < floor else self

    def at_most(self, ceiling: "ModelTier") -> "ModelTier":
        """Lower this tier to ``ceiling`` if it is higher."""
        return ceiling if self > ceiling else self


_TIER_ORDER = [ModelTier.SIMPLE, ModelTier.MODERATE, ModelTier.COMPLEX, ModelTier.EXPERT]


class UploadIntent(str, Enum):
    """Upload destination chosen by the external file categorizer."""
    IMAGE = "image"
    FILE_SEARCH = "file_search"
    CODE_INTERPRETER = "code_interpreter"


class OutputType(str, Enum):
    """Kind of output a previous assistant turn produced."""
    CHART = "chart"
    CODE = "code"
    DOCUMENT = "document"
    UI_COMPONENT = "ui_component"
    SEARCH_RESULT = "search_result"


@dataclass(frozen=True)
class Signal:
    """One piece of evidence that a tool is relevant."""
    tool: Tool
    source: SignalSource
    score: float  # raw, in [0, 1] before weighting
    reason: str = "matched"


@dataclass(frozen=True)
class ToolScoreEntry:
    """Aggregated score for one tool."""
    score: float = 0.0
    reasons: tuple[str, ...] = ()
    sources: tuple[SignalSource, ...] = ()


@dataclass
class FileInfo:
    """An attached file as described by the upload layer."""
    filename: str
    mimetype: str
    size: Optional[int] = None


@dataclass
class AttachedFileContext:
    """Attached files plus the upload intents the categorizer resolved for them."""
    files: list[FileInfo] = field(default_factory=list)
    upload_intents: list[UploadIntent] = field(default_factory=list)

    def __post_init__(self):
        files = []
        for item in self.files or []:
            if isinstance(item, dict):
                item = FileInfo(
                    filename=str(item.get("filename", "")),
                    mimetype=str(item.get("mimetype", "")),
                    size=item.get("size"),
                )
            if isinstance(item, FileInfo):
                files.append(item)
        self.files = files

        intents = []
        for intent in self.upload_intents or []:
            try:
                intents.append(UploadIntent(intent))
            except ValueError:
                continue
        self.upload_intents = intents


@dataclass
class ConversationTurn:
    """One prior message in the conversation."""
    role: str  # "user" or "assistant"
    content: str


@dataclass
class PreviousToolContext:
    """What the previous assistant turn used and produced."""
    last_used_tools: list[Tool] = field(default_factory=list)
    last_output_type: Optional[OutputType] = None
    last_tool_success: bool = True


def coerce_tools(values: Any) -> list[Tool]:
    """Turn a loose list of tool names into a de-duplicated Tool list."""
    tools: list[Tool] = []
    for value in values or []:
        tool = Tool.parse(value)
        if tool is not None and tool not in tools:
            tools.append(tool)
    return tools


def coerce_history(values: Any) -> list[ConversationTurn]:
    """Accept ConversationTurn objects or {role, content} dicts."""
    turns: list[ConversationTurn] = []
    for item in values or []:
        if isinstance(item, ConversationTurn):
            turns.append(item)
        elif isinstance(item, dict):
            turns.append(ConversationTurn(
                role=str(item.get("role", "user")),
                content=str(item.get("content") or ""),
            ))
    return turns


@dataclass
class QueryContext:
    """Caller-supplied input for one routing call.

    Missing or malformed fields degrade to empty values instead of raising.
    """
    query: str = ""
    available_tools: list[Tool] = field(default_factory=list)
    auto_enabled_tools: list[Tool] = field(default_factory=list)
    user_selected_tools: list[Tool] = field(default_factory=list)
    attached_files: Optional[AttachedFileContext] = None
    conversation_history: list[ConversationTurn] = field(default_factory=list)
    previous_tool_context: Optional[PreviousToolContext] = None

    def __post_init__(self):
        self.query = self.query if isinstance(self.query, str) else ""
        self.available_tools = coerce_tools(self.available_tools)
        self.auto_enabled_tools = coerce_tools(self.auto_enabled_tools)
        self.user_selected_tools = coerce_tools(self.user_selected_tools)
        self.conversation_history = coerce_history(self.conversation_history)
        if isinstance(self.attached_files, dict):
            self.attached_files = AttachedFileContext(
                files=self.attached_files.get("files", []),
                upload_intents=self.attached_files.get("upload_intents", []),
            )


@dataclass
class ModelRoutingResult:
    """Tier decision for a query."""
    tier: ModelTier
    score: float
    categories: list[str]
    reasoning: str


@dataclass
class QueryIntentResult:
    """Tool decision for a query."""
    tools: list[Tool]
    confidence: float
    reasoning: str
    clarification_prompt: Optional[str] = None
    clarification_options: Optional[list[str]] = None

    # Diagnostics (aggregated scores, signal count)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class UnifiedQueryResult:
    """Combined tool and tier decision."""
    tools: QueryIntentResult
    model: ModelRoutingResult
    used_llm_fallback: bool = False
    classifier_usage: Any = None


@dataclass
class ClassifierReply:
    """Rich return type for an injected classifier."""
    text: str
    usage: dict[str, int] = field(default_factory=dict)


def capability_to_tool(capability: str) -> Optional[Tool]:
    """Map a capability name (e.g. ``execute_code``) to a Tool."""
    try:
        return Tool(capability)
    except ValueError:
        return None


def tool_to_capability(tool: Tool) -> str:
    """Map a Tool to its capability name."""
    return tool.value
