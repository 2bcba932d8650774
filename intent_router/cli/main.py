"""Developer CLI for inspecting routing decisions.

Commands:
- intent-router analyze <query>
- intent-router score <query>
- intent-router presets
"""

import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from intent_router.complexity import (
    CATEGORY_PATTERNS,
    category_score,
    estimate_tokens,
    get_tier_threshold,
    resolve_policy,
    score_query_complexity,
)
from intent_router.config.loader import load_settings
from intent_router.models import AttachedFileContext, ModelTier, UploadIntent
from intent_router.presets import PROVIDER_PRESETS, get_model, get_preset
from intent_router.router import UniversalRoutingResult, route_query
from intent_router.utils.logging import configure_logging

app = typer.Typer(
    name="intent-router",
    help="Inspect tool and model-tier routing decisions",
    no_args_is_help=True,
)

console = Console()


def _load_history(path: Path) -> list[dict[str, Any]]:
    """Read a JSON list of ``{role, content}`` turns."""
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]✗[/red] Could not read history file {path}: {e}")
        raise typer.Exit(1)
    if not isinstance(data, list):
        console.print(f"[red]✗[/red] History file must contain a JSON list of turns: {path}")
        raise typer.Exit(1)
    return data


def _attachments(intents: list[str]) -> Optional[AttachedFileContext]:
    if not intents:
        return None
    valid = {intent.value for intent in UploadIntent}
    for intent in intents:
        if intent not in valid:
            console.print(
                f"[yellow]⚠️ Ignoring unknown upload intent '{intent}' "
                f"(expected one of: {', '.join(sorted(valid))})[/yellow]"
            )
    return AttachedFileContext(upload_intents=intents)


def _result_to_dict(result: UniversalRoutingResult) -> dict[str, Any]:
    return {
        "tools": [tool.value for tool in result.tools],
        "toolReasoning": result.tool_reasoning,
        "confidence": round(result.confidence, 4),
        "model": result.model,
        "tier": result.tier.value,
        "score": round(result.score, 4),
        "reason": result.reason,
        "usedLlmFallback": result.used_llm_fallback,
        "clarificationPrompt": result.clarification_prompt,
        "clarificationOptions": result.clarification_options,
        "classifierUsage": result.classifier_usage,
    }


def _print_result(query: str, result: UniversalRoutingResult) -> None:
    table = Table(box=box.ROUNDED, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Tools", ", ".join(t.value for t in result.tools) or "[dim]none[/dim]")
    table.add_row("Tool reasoning", result.tool_reasoning)
    table.add_row("Confidence", f"{result.confidence:.2f}")
    table.add_row("Tier", result.tier.value)
    table.add_row("Score", f"{result.score:.2f}")
    table.add_row("Model", result.model)
    table.add_row("Reason", result.reason)
    table.add_row("Classifier", "[green]used[/green]" if result.used_llm_fallback else "[dim]not used[/dim]")
    if result.classifier_usage:
        table.add_row("Classifier usage", json.dumps(result.classifier_usage))

    console.print(Panel(table, title=f"[bold]{query[:60]}[/bold]", expand=False))

    if result.clarification_prompt:
        console.print(f"\n[bold yellow]Clarification:[/bold yellow] {result.clarification_prompt}")
        for i, option in enumerate(result.clarification_options or [], 1):
            console.print(f"  {i}. {option}")


@app.command("analyze")
def analyze(
    query: str = typer.Argument(..., help="Query to route"),
    tools: Optional[List[str]] = typer.Option(None, "--tool", "-t", help="Available tool (repeatable)"),
    auto: Optional[List[str]] = typer.Option(None, "--auto", "-a", help="Auto-enabled tool (repeatable)"),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="User-selected tool (repeatable)"),
    attach: Optional[List[str]] = typer.Option(
        None, "--attach", help="Upload intent of an attached file: image, file_search, code_interpreter"
    ),
    history: Optional[Path] = typer.Option(None, "--history", help="JSON file with prior turns"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Model provider"),
    preset: Optional[str] = typer.Option(None, "--preset", help="Tier-to-model preset"),
    policy: Optional[str] = typer.Option(None, "--policy", help="Complexity scoring policy"),
    classifier_model: Optional[str] = typer.Option(
        None, "--classifier-model", help="Enable the LLM fallback classifier with this model"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the decision as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show routing debug logs"),
):
    """Route a query and show the decision."""
    settings = load_settings()
    configure_logging(level=settings.log_level, verbose=verbose)

    if classifier_model:
        settings.classifier.enabled = True
        settings.classifier.model = classifier_model

    overrides: dict[str, Any] = {
        "available_tools": tools or [],
        "auto_enabled_tools": auto or [],
        "user_selected_tools": select or [],
        "attached_files": _attachments(attach or []),
        "conversation_history": _load_history(history) if history else [],
        "classifier": settings.build_classifier(),
    }
    if provider:
        overrides["provider"] = provider
    if preset:
        overrides["preset"] = preset
    if policy:
        overrides["policy"] = policy

    try:
        config = settings.router_config(**overrides)
        result = asyncio.run(route_query(query, config))
    except ValueError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(_result_to_dict(result), indent=2))
    else:
        _print_result(query, result)


@app.command("score")
def score(
    query: str = typer.Argument(..., help="Query to score"),
    policy: Optional[str] = typer.Option(None, "--policy", help="Complexity scoring policy"),
):
    """Show the complexity breakdown for a query."""
    try:
        scoring = resolve_policy(policy)
    except ValueError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    result = score_query_complexity(query, scoring)

    console.print(f"[bold]Tier:[/bold] {result.tier.value}  [bold]Score:[/bold] {result.score:.2f}")
    console.print(f"[bold]Reason:[/bold] {result.reasoning}")
    console.print(f"[bold]Categories:[/bold] {', '.join(result.categories)}")
    console.print(f"[dim]Policy: {scoring.name}, ~{estimate_tokens(query)} tokens[/dim]\n")

    table = Table(title="Category Scores", box=box.SIMPLE_HEAD)
    table.add_column("Category", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Score", justify="right", style="yellow")
    for name in CATEGORY_PATTERNS:
        weight = scoring.category_weights.get(name, 0.0)
        table.add_row(name, f"{weight:.2f}", f"{category_score(query, name, weight):.3f}")
    console.print(table)

    tiers = Table(title="Tier Thresholds", box=box.SIMPLE_HEAD)
    tiers.add_column("Tier", style="cyan")
    tiers.add_column("Range")
    for tier in ModelTier:
        low, high = get_tier_threshold(tier, scoring)
        label = "unreachable" if low >= 1.0 else f"{low:.2f} - {high:.2f}"
        marker = " [green]◀[/green]" if tier == result.tier else ""
        tiers.add_row(tier.value, label + marker)
    console.print(tiers)


@app.command("presets")
def presets(
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Only show this provider"),
):
    """Show tier-to-model preset tables."""
    providers = [provider] if provider else list(PROVIDER_PRESETS)

    for name in providers:
        if name not in PROVIDER_PRESETS:
            console.print(f"[red]✗[/red] Unknown provider '{name}'. Available: {', '.join(PROVIDER_PRESETS)}")
            raise typer.Exit(1)

        default_preset = get_preset(name)
        table = Table(title=f"{name} presets", box=box.ROUNDED)
        table.add_column("Preset", style="cyan")
        for tier in ModelTier:
            table.add_column(tier.value)

        for preset_name, mapping in PROVIDER_PRESETS[name].items():
            label = f"{preset_name} (default)" if mapping is default_preset else preset_name
            cells = []
            for tier in ModelTier:
                model = get_model(mapping[tier])
                cells.append(model.name if model else mapping[tier])
            table.add_row(label, *cells)

        console.print(table)


if __name__ == "__main__":
    app()
