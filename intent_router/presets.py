"""Model catalogs and tier-to-model presets per provider.

Bedrock tiers (per 1K tokens, input/output):
    simple   Nova Micro   $0.000035 / $0.00014   greetings, text-only replies
    moderate Haiku 4.5    $0.001 / $0.005        most tasks, any tool usage
    complex  Sonnet 4.5   $0.003 / $0.015        debugging, detailed analysis
    expert   Opus 4.5     $0.005 / $0.025        architecture, deep research
"""

from dataclasses import dataclass, field

from .models import ModelTier


@dataclass(frozen=True)
class ModelConfig:
    """One model in a provider catalog."""
    id: str
    name: str
    tier: ModelTier
    input_cost_per_1k: float
    output_cost_per_1k: float
    max_tokens: int
    capabilities: tuple[str, ...] = field(default_factory=tuple)
    vendor: str = ""


NOVA_MICRO = "us.amazon.nova-micro-v1:0"
NOVA_LITE = "us.amazon.nova-lite-v1:0"
NOVA_PRO = "us.amazon.nova-pro-v1:0"
HAIKU_4_5 = "us.anthropic.claude-haiku-4-5-20251001-v1:0"
SONNET_4_5 = "us.anthropic.claude-sonnet-4-5-20250929-v1:0"
OPUS_4_5 = "global.anthropic.claude-opus-4-5-20251101-v1:0"

# Cheapest model, used for routing classification only
CLASSIFIER_MODEL = NOVA_MICRO


BEDROCK_MODELS: dict[str, ModelConfig] = {
    NOVA_MICRO: ModelConfig(
        id=NOVA_MICRO, name="Amazon Nova Micro", tier=ModelTier.SIMPLE,
        input_cost_per_1k=0.000035, output_cost_per_1k=0.00014, max_tokens=128000,
        capabilities=("general", "fast"), vendor="amazon",
    ),
    HAIKU_4_5: ModelConfig(
        id=HAIKU_4_5, name="Claude Haiku 4.5", tier=ModelTier.MODERATE,
        input_cost_per_1k=0.001, output_cost_per_1k=0.005, max_tokens=200000,
        capabilities=("general", "coding", "tools", "fast", "extended-thinking"), vendor="anthropic",
    ),
    NOVA_LITE: ModelConfig(
        id=NOVA_LITE, name="Amazon Nova Lite", tier=ModelTier.SIMPLE,
        input_cost_per_1k=0.00006, output_cost_per_1k=0.00024, max_tokens=300000,
        capabilities=("general", "fast", "vision", "video"), vendor="amazon",
    ),
    NOVA_PRO: ModelConfig(
        id=NOVA_PRO, name="Amazon Nova Pro", tier=ModelTier.MODERATE,
        input_cost_per_1k=0.0008, output_cost_per_1k=0.0032, max_tokens=300000,
        capabilities=("general", "coding", "tools", "vision", "video"), vendor="amazon",
    ),
    SONNET_4_5: ModelConfig(
        id=SONNET_4_5, name="Claude Sonnet 4.5", tier=ModelTier.COMPLEX,
        input_cost_per_1k=0.003, output_cost_per_1k=0.015, max_tokens=200000,
        capabilities=("reasoning", "coding", "analysis", "vision", "tools", "extended-thinking"),
        vendor="anthropic",
    ),
    OPUS_4_5: ModelConfig(
        id=OPUS_4_5, name="Claude Opus 4.5", tier=ModelTier.EXPERT,
        input_cost_per_1k=0.005, output_cost_per_1k=0.025, max_tokens=200000,
        capabilities=("reasoning", "coding", "analysis", "vision", "tools", "extended-thinking"),
        vendor="anthropic",
    ),
}

OPENAI_MODELS: dict[str, ModelConfig] = {
    "gpt-4o": ModelConfig(
        id="gpt-4o", name="GPT-4o", tier=ModelTier.COMPLEX,
        input_cost_per_1k=0.005, output_cost_per_1k=0.015, max_tokens=128000,
        capabilities=("reasoning", "coding", "analysis", "vision", "tools"), vendor="openai",
    ),
    "gpt-4-turbo": ModelConfig(
        id="gpt-4-turbo", name="GPT-4 Turbo", tier=ModelTier.COMPLEX,
        input_cost_per_1k=0.01, output_cost_per_1k=0.03, max_tokens=128000,
        capabilities=("reasoning", "coding", "analysis", "vision", "tools"), vendor="openai",
    ),
    "o1-preview": ModelConfig(
        id="o1-preview", name="o1 Preview", tier=ModelTier.EXPERT,
        input_cost_per_1k=0.015, output_cost_per_1k=0.06, max_tokens=128000,
        capabilities=("reasoning", "coding", "analysis"), vendor="openai",
    ),
    "gpt-4o-mini": ModelConfig(
        id="gpt-4o-mini", name="GPT-4o Mini", tier=ModelTier.MODERATE,
        input_cost_per_1k=0.00015, output_cost_per_1k=0.0006, max_tokens=128000,
        capabilities=("general", "coding", "vision", "tools", "fast"), vendor="openai",
    ),
    "o1-mini": ModelConfig(
        id="o1-mini", name="o1 Mini", tier=ModelTier.MODERATE,
        input_cost_per_1k=0.003, output_cost_per_1k=0.012, max_tokens=128000,
        capabilities=("reasoning", "coding"), vendor="openai",
    ),
    "gpt-3.5-turbo": ModelConfig(
        id="gpt-3.5-turbo", name="GPT-3.5 Turbo", tier=ModelTier.SIMPLE,
        input_cost_per_1k=0.0005, output_cost_per_1k=0.0015, max_tokens=16385,
        capabilities=("general", "fast"), vendor="openai",
    ),
    "gpt-3.5-turbo-0125": ModelConfig(
        id="gpt-3.5-turbo-0125", name="GPT-3.5 Turbo 0125", tier=ModelTier.SIMPLE,
        input_cost_per_1k=0.0005, output_cost_per_1k=0.0015, max_tokens=16385,
        capabilities=("general", "fast", "tools"), vendor="openai",
    ),
}


# Preset name -> tier -> model id. Presets differ only in what backs complex/expert.
BEDROCK_PRESETS: dict[str, dict[ModelTier, str]] = {
    # Full four tiers with Opus at the top
    "premium": {
        ModelTier.EXPERT: OPUS_4_5,
        ModelTier.COMPLEX: SONNET_4_5,
        ModelTier.MODERATE: HAIKU_4_5,
        ModelTier.SIMPLE: NOVA_MICRO,
    },
    # Sonnet at the top, no Opus
    "costOptimized": {
        ModelTier.EXPERT: SONNET_4_5,
        ModelTier.COMPLEX: SONNET_4_5,
        ModelTier.MODERATE: HAIKU_4_5,
        ModelTier.SIMPLE: NOVA_MICRO,
    },
    # Haiku at the top for high-volume, cost-sensitive use
    "ultraCheap": {
        ModelTier.EXPERT: HAIKU_4_5,
        ModelTier.COMPLEX: HAIKU_4_5,
        ModelTier.MODERATE: HAIKU_4_5,
        ModelTier.SIMPLE: NOVA_MICRO,
    },
}

OPENAI_PRESETS: dict[str, dict[ModelTier, str]] = {
    "premium": {
        ModelTier.EXPERT: "o1-preview",
        ModelTier.COMPLEX: "gpt-4o",
        ModelTier.MODERATE: "gpt-4o-mini",
        ModelTier.SIMPLE: "gpt-3.5-turbo-0125",
    },
    "standard": {
        ModelTier.EXPERT: "gpt-4o",
        ModelTier.COMPLEX: "gpt-4o",
        ModelTier.MODERATE: "gpt-4o-mini",
        ModelTier.SIMPLE: "gpt-3.5-turbo-0125",
    },
    "economy": {
        ModelTier.EXPERT: "gpt-4o-mini",
        ModelTier.COMPLEX: "gpt-4o-mini",
        ModelTier.MODERATE: "gpt-4o-mini",
        ModelTier.SIMPLE: "gpt-3.5-turbo-0125",
    },
}

PROVIDER_PRESETS: dict[str, dict[str, dict[ModelTier, str]]] = {
    "bedrock": BEDROCK_PRESETS,
    "openai": OPENAI_PRESETS,
}

PROVIDER_MODELS: dict[str, dict[str, ModelConfig]] = {
    "bedrock": BEDROCK_MODELS,
    "openai": OPENAI_MODELS,
}

DEFAULT_PRESETS = {
    "bedrock": "costOptimized",
    "openai": "standard",
}

DEFAULT_PROVIDER = "bedrock"


def get_preset(provider: str = DEFAULT_PROVIDER, preset: str | None = None) -> dict[ModelTier, str]:
    """
    Get the tier-to-model mapping for a provider preset.

    Args:
        provider: "bedrock" or "openai".
        preset: Preset name; the provider's default when omitted.

    Raises:
        ValueError: If the provider or preset is unknown.
    """
    presets = PROVIDER_PRESETS.get(provider)
    if presets is None:
        raise ValueError(f"Unknown provider '{provider}'. Available: {', '.join(PROVIDER_PRESETS)}")
    name = preset or DEFAULT_PRESETS[provider]
    if name not in presets:
        raise ValueError(
            f"Unknown preset '{name}' for provider '{provider}'. Available: {', '.join(presets)}"
        )
    return presets[name]


def get_model_for_tier(
    tier: ModelTier | str,
    preset: str | None = None,
    provider: str = DEFAULT_PROVIDER,
) -> str:
    """Model id backing ``tier`` in a preset."""
    return get_preset(provider, preset)[ModelTier(tier)]


def get_model(model_id: str) -> ModelConfig | None:
    """Look up a model in any catalog."""
    for catalog in PROVIDER_MODELS.values():
        if model_id in catalog:
            return catalog[model_id]
    return None


def get_models_by_tier(tier: ModelTier | str, provider: str = DEFAULT_PROVIDER) -> list[ModelConfig]:
    tier = ModelTier(tier)
    return [m for m in PROVIDER_MODELS.get(provider, {}).values() if m.tier == tier]


def calculate_cost(model_id: str, input_tokens: int, output_tokens: int) -> float:
    """Cost of one request in dollars; 0 for models outside the catalogs."""
    model = get_model(model_id)
    if model is None:
        return 0.0
    return (
        (input_tokens / 1000) * model.input_cost_per_1k
        + (output_tokens / 1000) * model.output_cost_per_1k
    )


def estimate_cost_savings(
    expensive_model_id: str,
    cheap_model_id: str,
    input_tokens: int,
    output_tokens: int,
) -> dict[str, float]:
    """Compare the cost of one request on two models."""
    expensive_cost = calculate_cost(expensive_model_id, input_tokens, output_tokens)
    cheap_cost = calculate_cost(cheap_model_id, input_tokens, output_tokens)
    savings = expensive_cost - cheap_cost
    return {
        "expensive_cost": expensive_cost,
        "cheap_cost": cheap_cost,
        "savings": savings,
        "savings_percent": (savings / expensive_cost) * 100 if expensive_cost > 0 else 0.0,
    }
