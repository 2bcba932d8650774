"""Query complexity scoring for model tier selection.

Scores the query text alone, independent of tool selection. One scoring path
serves every named policy; a policy only supplies tier thresholds, category
weights and an optional score cap.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from loguru import logger

from .models import ModelRoutingResult, ModelTier
from .patterns import (
    CODE_PATTERNS,
    CREATIVE_PATTERNS,
    DEEP_ANALYSIS_PATTERNS,
    EXPERT_COMPLEXITY_PATTERNS,
    EXPERT_PATTERNS,
    MATH_PATTERNS,
    MULTI_STEP_PATTERNS,
    REASONING_PATTERNS,
    SIMPLE_PATTERNS,
    TECHNICAL_DOMAIN_PATTERNS,
    UI_GENERATION_PATTERNS,
    any_match,
    count_matches,
)


CATEGORY_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "code": CODE_PATTERNS,
    "reasoning": REASONING_PATTERNS,
    "math": MATH_PATTERNS,
    "creative": CREATIVE_PATTERNS,
    "ui_generation": UI_GENERATION_PATTERNS,
    "expert": EXPERT_PATTERNS,
}

DEFAULT_CATEGORY_WEIGHTS = {
    "code": 0.35,
    "reasoning": 0.25,
    "expert": 0.45,
    "math": 0.15,
    "creative": 0.15,
    "ui_generation": 0.20,
}


@dataclass(frozen=True)
class ScoringPolicy:
    """Thresholds and weights for mapping a complexity score to a tier."""
    name: str
    moderate_threshold: float
    complex_threshold: float
    expert_threshold: Optional[float]  # None: expert is never chosen
    category_weights: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS)
    )
    score_cap: Optional[float] = None  # applies unless deep analysis is requested
    deep_analysis_floor: Optional[float] = None


AGGRESSIVE = ScoringPolicy(
    name="aggressive",
    moderate_threshold=0.10,
    complex_threshold=0.55,
    expert_threshold=0.85,
)

# Defaults nearly everything to moderate; complex only on an explicit
# deep-analysis request
CONSERVATIVE = ScoringPolicy(
    name="conservative",
    moderate_threshold=0.10,
    complex_threshold=0.70,
    expert_threshold=None,
    score_cap=0.65,
    deep_analysis_floor=0.75,
)

POLICIES: dict[str, ScoringPolicy] = {
    AGGRESSIVE.name: AGGRESSIVE,
    CONSERVATIVE.name: CONSERVATIVE,
}

DEFAULT_POLICY = AGGRESSIVE.name

PolicyLike = Union[str, ScoringPolicy, None]


def resolve_policy(policy: PolicyLike) -> ScoringPolicy:
    """Look up a policy by name. Unknown names raise ValueError."""
    if policy is None:
        return POLICIES[DEFAULT_POLICY]
    if isinstance(policy, ScoringPolicy):
        return policy
    try:
        return POLICIES[policy]
    except KeyError:
        raise ValueError(
            f"Unknown scoring policy '{policy}'. Available: {', '.join(POLICIES)}"
        ) from None


# ========== FEATURES ==========

def estimate_tokens(text: str) -> int:
    """Rough token count at four characters per token."""
    return math.ceil(len(text) / 4)


def is_simple_query(query: str) -> bool:
    """Greeting or acknowledgement such as "thanks" or "good morning"."""
    return any_match(SIMPLE_PATTERNS, query.strip())


def has_technical_terms(query: str) -> bool:
    return any_match(TECHNICAL_DOMAIN_PATTERNS, query)


def has_multi_step(query: str) -> bool:
    return any_match(MULTI_STEP_PATTERNS, query)


def is_deep_analysis_request(query: str) -> bool:
    """Explicit ask for comprehensive research, a deep dive or debugging."""
    return any_match(DEEP_ANALYSIS_PATTERNS, query)


def has_expert_complexity(query: str, token_count: Optional[int] = None) -> bool:
    """Two or more expert keyword families, or one in a long technical prompt."""
    if token_count is None:
        token_count = estimate_tokens(query)
    hits = count_matches(EXPERT_COMPLEXITY_PATTERNS, query)
    return hits >= 2 or (hits >= 1 and token_count > 100 and has_technical_terms(query))


def length_adjustment(token_count: int) -> float:
    if token_count > 1000:
        return 0.15
    if token_count > 500:
        return 0.1
    if token_count > 200:
        return 0.05
    if token_count < 20:
        return -0.1
    if token_count < 50:
        return -0.05
    return 0.0


def category_score(query: str, category: str, weight: float) -> float:
    """``weight * (0.5 + 0.5 * matched_fraction)``, or 0 without a match."""
    patterns = CATEGORY_PATTERNS[category]
    matches = count_matches(patterns, query)
    if matches == 0:
        return 0.0
    return weight * (0.5 + 0.5 * min(matches / len(patterns), 1.0))


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


# ========== SCORING ==========

def calculate_complexity_score(query: str, policy: PolicyLike = None) -> float:
    """
    Compute a complexity score in [0, 1].

    Greetings short-circuit to at most 0.12. Otherwise the first matching
    branch anchors the score (expert patterns, expert keyword families,
    code with reasoning, any moderate category, creative, base), then length,
    technical-term and multi-step adjustments are applied.
    """
    policy = resolve_policy(policy)
    tokens = estimate_tokens(query)

    if is_simple_query(query):
        return max(0.0, min(0.12, 0.05 + length_adjustment(tokens)))

    weights = policy.category_weights
    scores = {
        name: category_score(query, name, weights.get(name, 0.0))
        for name in CATEGORY_PATTERNS
    }
    code, reasoning, expert = scores["code"], scores["reasoning"], scores["expert"]
    math_score, creative, ui = scores["math"], scores["creative"], scores["ui_generation"]
    technical = has_technical_terms(query)

    anchored = True
    if expert > 0:
        score = 0.80 + expert * 0.15
    elif has_expert_complexity(query, tokens):
        score = 0.85
    elif code > 0 and (reasoning > 0 or technical):
        score = 0.65 + code * 0.10
    else:
        anchored = False
        if ui > 0 or code > 0 or reasoning > 0 or math_score > 0:
            score = 0.40 + ui * 0.1 + code * 0.1 + reasoning * 0.05 + math_score * 0.05
        elif creative > 0:
            score = 0.35 + creative * 0.1
        else:
            score = 0.20

    # Short prompts can still need a strong model once a high branch fired
    if not anchored:
        score += length_adjustment(tokens)

    if technical and score < 0.60:
        score += 0.15
    if has_multi_step(query):
        score += 0.20

    if policy.score_cap is not None:
        if is_deep_analysis_request(query) and policy.deep_analysis_floor is not None:
            score = max(score, policy.deep_analysis_floor)
        else:
            score = min(score, policy.score_cap)

    return _clamp(score)


def get_tier_from_score(score: float, policy: PolicyLike = None) -> ModelTier:
    policy = resolve_policy(policy)
    if policy.expert_threshold is not None and score >= policy.expert_threshold:
        return ModelTier.EXPERT
    if score >= policy.complex_threshold:
        return ModelTier.COMPLEX
    if score >= policy.moderate_threshold:
        return ModelTier.MODERATE
    return ModelTier.SIMPLE


def get_tier_threshold(tier: ModelTier, policy: PolicyLike = None) -> tuple[float, float]:
    """
    Score range ``(min, max)`` that maps to ``tier`` under ``policy``.

    A tier the policy never selects reports the empty range ``(1.0, 1.0)``.
    """
    policy = resolve_policy(policy)
    top = policy.expert_threshold if policy.expert_threshold is not None else 1.0
    ranges = {
        ModelTier.SIMPLE: (0.0, policy.moderate_threshold),
        ModelTier.MODERATE: (policy.moderate_threshold, policy.complex_threshold),
        ModelTier.COMPLEX: (policy.complex_threshold, top),
        ModelTier.EXPERT: (top, 1.0),
    }
    return ranges[ModelTier(tier)]


def detect_categories(query: str) -> list[str]:
    """Pattern families that fire for the query, or ``["general"]``."""
    categories = [name for name, patterns in CATEGORY_PATTERNS.items() if any_match(patterns, query)]
    return categories or ["general"]


def routing_reason(query: str) -> str:
    if any_match(CODE_PATTERNS, query):
        return "Code-related query detected"
    if any_match(MATH_PATTERNS, query):
        return "Mathematical content detected"
    if any_match(REASONING_PATTERNS, query):
        return "Reasoning or analysis required"
    if any_match(CREATIVE_PATTERNS, query):
        return "Creative writing task"
    if any_match(EXPERT_PATTERNS, query):
        return "Deep analysis requested"
    if any_match(UI_GENERATION_PATTERNS, query):
        return "UI generation request"
    if is_simple_query(query):
        return "Simple greeting or acknowledgment"
    return "General query"


def score_query_complexity(query: str, policy: PolicyLike = None) -> ModelRoutingResult:
    """
    Score a query and map it to a model tier.

    Args:
        query: Raw query text.
        policy: Policy name or ScoringPolicy (defaults to ``aggressive``).

    Returns:
        ModelRoutingResult with tier, score, non-empty categories and reasoning.
    """
    query = query if isinstance(query, str) else ""
    policy = resolve_policy(policy)
    score = calculate_complexity_score(query, policy)
    tier = get_tier_from_score(score, policy)
    categories = detect_categories(query)

    logger.debug(f"Complexity {score:.2f} -> {tier.value} ({policy.name}) {categories}")

    return ModelRoutingResult(
        tier=tier,
        score=score,
        categories=categories,
        reasoning=routing_reason(query),
    )
