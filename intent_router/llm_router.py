"""LLM-assisted classification for queries the local signals cannot settle."""

import asyncio
import inspect
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

import json_repair
from loguru import logger

from intent_router.providers.base import LLMProvider

from .models import (
    AttachedFileContext,
    ClassifierReply,
    ConversationTurn,
    ModelRoutingResult,
    ModelTier,
    QueryIntentResult,
    Tool,
    UnifiedQueryResult,
)
from .patterns import CLASSIFIER_TIER_SCORES, CLASSIFIER_TOOL_ALIASES, SELECTION_PATTERNS, any_match


# An injected classifier receives the prompt and returns the model's text,
# either directly or wrapped in a ClassifierReply that also carries token usage
ClassifierResult = Union[str, ClassifierReply]
ClassifierFunction = Callable[[str], Union[ClassifierResult, Awaitable[ClassifierResult]]]


TOOL_DESCRIPTIONS = {
    Tool.WEB_SEARCH: "web_search - look up current information on the internet: news, prices, weather, live results",
    Tool.CODE_INTERPRETER: "execute_code - run Python for calculations, data analysis, file generation and static (image) charts; not for UI",
    Tool.FILE_SEARCH: "file_search - retrieve passages from the user's uploaded documents",
    Tool.ARTIFACTS: "artifacts - build interactive UI: React components, dashboards, HTML pages, diagrams, interactive charts; works on its own",
    Tool.YOUTUBE_VIDEO: "youtube_video - fetch the transcript and details of a YouTube video from its link",
}

MODEL_TIER_TABLE = """
MODEL TIERS (choose the cheapest one that can do the job):
| Tier     | Relative cost | Use for                                                        |
|----------|---------------|----------------------------------------------------------------|
| simple   | 1x            | greetings, acknowledgements, short factual answers, tool relay |
| moderate | 5x            | explanations, summaries, everyday code, UI components          |
| complex  | 15x           | debugging, code review, careful multi-part analysis            |
| expert   | 25x+          | system architecture, algorithm design, research-grade work     |

Cost rules:
- Acknowledgements such as "cool", "nice" or "got it" are simple and never need clarification.
- Asking for "more detail" or "a detailed analysis" is moderate at most, not expert.
- Reserve expert for architecture, algorithm design and in-depth research.
"""

REPLY_SCHEMA = """Reply with JSON only:
{
  "tools": ["tool_name"],
  "modelTier": "simple|moderate|complex|expert",
  "reasoning": "one short sentence",
  "needsClarification": false,
  "clarificationPrompt": null,
  "clarificationOptions": null
}"""

CLASSIFIER_RULES = """Clarification:
- Set needsClarification=true only when the request is genuinely ambiguous, and give a
  clarificationPrompt plus clarificationOptions in plain, non-technical language.
- "visualize this" or "show me a chart" with both artifacts and execute_code available is
  ambiguous: offer an interactive chart or a static image chart.
- "build a react dashboard", "plot this with matplotlib" and "search for news" are clear.

Tool choice:
- artifacts alone covers dashboards, components, HTML pages and interactive charts.
- execute_code alone covers calculations, data analysis, file processing and image charts.
- Combine them only when the user needs both Python analysis and an interactive UI.
- Follow-ups on fetched data ("analyze that", "more detail") keep web_search when fresh
  data is needed and stay at simple or moderate tier.

Selection replies:
- A reply such as "1", "b" or "option 2" picks an option from the previous assistant
  message. Map it to the tool that option describes and never return an empty tools list.
  Interactive/dashboard/component options map to artifacts; Python/image chart options
  map to execute_code.

When the local suggestion already looks right, keep it. When unsure, pick the lower tier."""

SYSTEM_PROMPT = "You are a routing classifier. Respond ONLY with valid JSON."

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_TOOL_NAME_STRIP = re.compile(r"[^a-z_]")

HISTORY_TURNS = 3
HISTORY_TURN_CHARS = 300


# ========== PROMPT ==========

def describe_file_type(mimetype: str) -> str:
    mimetype = (mimetype or "").lower()
    if mimetype.startswith("image/"):
        return "IMAGE"
    if "pdf" in mimetype:
        return "PDF"
    if "csv" in mimetype:
        return "CSV DATA"
    if "spreadsheet" in mimetype or "excel" in mimetype:
        return "SPREADSHEET"
    if "text" in mimetype:
        return "TEXT FILE"
    return "FILE"


def _history_section(history: Sequence[ConversationTurn]) -> str:
    if not history:
        return ""
    lines = [
        f"[{turn.role.upper()}]: {turn.content[:HISTORY_TURN_CHARS]}"
        for turn in history[-HISTORY_TURNS:]
    ]
    return "=== CONVERSATION HISTORY (needed to resolve selections) ===\n" + "\n".join(lines) + "\n=== END HISTORY ===\n"


def _selection_section(query: str) -> str:
    if not any_match(SELECTION_PATTERNS, query.strip()):
        return ""
    return (
        f'SELECTION: "{query.strip()}" picks one of the options offered above. '
        "Return the tool that option corresponds to; an empty tools list is wrong here.\n"
    )


def _attachments_section(attached_files: Optional[AttachedFileContext]) -> str:
    if not attached_files or not attached_files.files:
        return ""
    files = "\n".join(
        f"  - {describe_file_type(f.mimetype)}: {f.filename} ({f.mimetype})"
        for f in attached_files.files
    )
    intents = ", ".join(i.value for i in attached_files.upload_intents) or "none"
    return (
        "=== ATTACHED FILES ===\n"
        f"The user attached {len(attached_files.files)} file(s):\n{files}\n"
        f"Upload intents: {intents}\n"
        "With files attached, \"summarize this\" or \"analyze this\" refers to them: images are read by "
        "the model directly, CSV and spreadsheets suggest execute_code, PDFs and documents suggest "
        "file_search. Do not ask for clarification when the files make the intent obvious.\n"
        "=== END ATTACHED FILES ===\n"
    )


def _suggestion_section(
    tools_result: Optional[QueryIntentResult],
    model_result: Optional[ModelRoutingResult],
) -> str:
    if tools_result is None or model_result is None:
        return ""
    tools = ", ".join(t.value for t in tools_result.tools) or "none"
    return (
        "Local pattern analysis suggests:\n"
        f"- Tools: {tools} (confidence: {tools_result.confidence * 100:.0f}%)\n"
        f"- Model tier: {model_result.tier.value} (score: {model_result.score * 100:.0f}%)\n"
        "Keep these unless they are clearly wrong.\n"
    )


def build_classification_prompt(
    query: str,
    available_tools: Sequence[Tool],
    tools_result: Optional[QueryIntentResult] = None,
    model_result: Optional[ModelRoutingResult] = None,
    history: Sequence[ConversationTurn] = (),
    attached_files: Optional[AttachedFileContext] = None,
) -> str:
    """Assemble the classifier prompt from the query and its context."""
    tool_list = "\n".join(TOOL_DESCRIPTIONS.get(t, t.value) for t in available_tools) or "No tools available"

    return "\n".join(part for part in (
        "You are a query classifier for an AI assistant. Pick the tools and the model tier for the user's query.",
        _history_section(history),
        _selection_section(query),
        _attachments_section(attached_files),
        f'User query: "{query}"',
        _suggestion_section(tools_result, model_result),
        f"Available tools:\n{tool_list}",
        MODEL_TIER_TABLE,
        REPLY_SCHEMA,
        CLASSIFIER_RULES,
    ) if part)


# ========== PARSING ==========

@dataclass
class ClassifierVerdict:
    """A classifier reply that passed validation."""
    tools: list[str]
    model_tier: str
    reasoning: str = "LLM classification"
    needs_clarification: bool = False
    clarification_prompt: Optional[str] = None
    clarification_options: Optional[list[str]] = None


@dataclass
class ParseFailure:
    """A classifier reply that could not be used."""
    reason: str
    raw: str = ""


ParseResult = Union[ClassifierVerdict, ParseFailure]


def parse_classification_response(text: Any) -> ParseResult:
    """
    Parse free-form classifier text into a verdict.

    The outermost ``{...}`` span is decoded leniently. ``tools`` must be a list and
    ``modelTier`` (or ``model_tier``) a string; other fields are optional and
    unknown fields are ignored.
    """
    if not isinstance(text, str):
        return ParseFailure(reason=f"Expected text, got {type(text).__name__}")

    match = _JSON_OBJECT.search(text)
    if not match:
        return ParseFailure(reason="No JSON object in response", raw=text)

    data = json_repair.loads(match.group(0))
    if not isinstance(data, dict):
        return ParseFailure(reason="Response is not a JSON object", raw=text)

    tools = data.get("tools")
    tier = data.get("modelTier", data.get("model_tier"))
    if not isinstance(tools, list):
        return ParseFailure(reason="Missing tools list", raw=text)
    if not isinstance(tier, str):
        return ParseFailure(reason="Missing modelTier", raw=text)

    options = data.get("clarificationOptions")
    prompt = data.get("clarificationPrompt")
    return ClassifierVerdict(
        tools=[t for t in tools if isinstance(t, str)],
        model_tier=tier.lower(),
        reasoning=str(data.get("reasoning") or "LLM classification"),
        needs_clarification=data.get("needsClarification") is True,
        clarification_prompt=prompt if isinstance(prompt, str) and prompt else None,
        clarification_options=[str(o) for o in options] if isinstance(options, list) else None,
    )


def map_tool_name(name: str, available_tools: Sequence[Tool]) -> Optional[Tool]:
    """Map a classifier tool name (with common variants) to an available Tool."""
    tool = CLASSIFIER_TOOL_ALIASES.get(_TOOL_NAME_STRIP.sub("", name.lower()))
    if tool is not None and tool in available_tools:
        return tool
    return None


def normalize_model_tier(tier: str) -> ModelTier:
    """Unknown values and ``trivial`` become ``simple``."""
    try:
        return ModelTier(tier.strip().lower())
    except ValueError:
        return ModelTier.SIMPLE


def verdict_to_result(
    verdict: ClassifierVerdict,
    available_tools: Sequence[Tool],
    usage: Any = None,
) -> UnifiedQueryResult:
    """Convert a parsed verdict into a routing result."""
    tools: list[Tool] = []
    for name in verdict.tools:
        tool = map_tool_name(name, available_tools)
        if tool is not None and tool not in tools:
            tools.append(tool)

    tier = normalize_model_tier(verdict.model_tier)
    # Artifact generation needs at least a moderate model
    if Tool.ARTIFACTS in tools:
        tier = tier.at_least(ModelTier.MODERATE)

    clarify = verdict.needs_clarification and verdict.clarification_prompt is not None
    reasoning = f"LLM: {verdict.reasoning}"

    return UnifiedQueryResult(
        tools=QueryIntentResult(
            tools=tools,
            confidence=0.5 if verdict.needs_clarification else 0.8,
            reasoning=reasoning,
            clarification_prompt=verdict.clarification_prompt if clarify else None,
            clarification_options=verdict.clarification_options if clarify else None,
        ),
        model=ModelRoutingResult(
            tier=tier,
            score=CLASSIFIER_TIER_SCORES[tier],
            categories=["llm-classified"],
            reasoning=reasoning,
        ),
        used_llm_fallback=True,
        classifier_usage=usage,
    )


async def classify_with_llm(
    query: str,
    available_tools: Sequence[Tool],
    classifier: ClassifierFunction,
    tools_result: Optional[QueryIntentResult] = None,
    model_result: Optional[ModelRoutingResult] = None,
    history: Sequence[ConversationTurn] = (),
    attached_files: Optional[AttachedFileContext] = None,
) -> Optional[UnifiedQueryResult]:
    """
    Ask the injected classifier for tools and tier.

    The classifier is called exactly once. Any exception or unusable reply is
    logged and yields None so the caller keeps its local result.
    """
    prompt = build_classification_prompt(
        query, available_tools, tools_result, model_result, history, attached_files
    )

    try:
        reply = classifier(prompt)
        if inspect.isawaitable(reply):
            reply = await reply
    except Exception as e:
        logger.warning(f"LLM classification failed: {e}")
        return None

    usage = None
    if isinstance(reply, ClassifierReply):
        usage = reply.usage or None
        reply = reply.text

    parsed = parse_classification_response(reply)
    if isinstance(parsed, ParseFailure):
        logger.warning(f"Unusable classifier response ({parsed.reason}): {parsed.raw[:100]}")
        return None

    result = verdict_to_result(parsed, available_tools, usage)
    logger.debug(
        f"Classifier picked [{', '.join(t.value for t in result.tools.tools) or 'none'}] "
        f"tier={result.model.tier.value}"
    )
    return result


# ========== PROVIDER-BACKED CLASSIFIER ==========

class LLMClassifier:
    """
    Classifier callable backed by an LLMProvider.

    Pass an instance as the ``classifier`` of a routing call. It enforces its own
    timeout and can retry once on a secondary model; errors propagate so the
    router can fall back to local results.
    """

    def __init__(
        self,
        provider: LLMProvider,
        model: str = "gpt-4o-mini",
        timeout_ms: int = 1500,
        secondary_model: str | None = None,
        max_tokens: int = 300,
        temperature: float = 0.1,
    ):
        self.provider = provider
        self.model = model
        self.timeout_ms = timeout_ms
        self.secondary_model = secondary_model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def __call__(self, prompt: str) -> ClassifierReply:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        try:
            return await self._call_llm(messages)
        except Exception as e:
            if not self.secondary_model:
                raise
            logger.warning(f"Classifier model {self.model} failed ({e}), trying {self.secondary_model}")
            return await self._call_llm(messages, model=self.secondary_model)

    async def _call_llm(self, messages: list[dict[str, Any]], model: str | None = None) -> ClassifierReply:
        """Call the provider with a timeout."""
        actual_model = model or self.model
        llm_task = asyncio.create_task(
            self.provider.chat(
                messages=messages,
                model=actual_model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        )

        try:
            response = await asyncio.wait_for(llm_task, timeout=self.timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            raise TimeoutError(f"LLM classification timed out after {self.timeout_ms}ms")

        if response.is_error:
            raise RuntimeError(response.content or "Provider returned an error")

        return ClassifierReply(text=response.content or "", usage=dict(response.usage))
