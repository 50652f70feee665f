# Copyright 2025 llmchorus contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Main CLI application entry point for llmchorus.

Commands:
- query: Send a prompt to every configured model and print the fused answer
- classify: Show the task type and strategy a prompt would get
- optimize: Rewrite a prompt with the rule-based optimizer
"""

from __future__ import annotations

import asyncio
import json
import logging

import typer
from rich.panel import Panel
from rich.table import Table

from llmchorus import __version__
from llmchorus.cli.demo import create_demo_providers
from llmchorus.llm import LLMError, OpenAICompatibleProvider, ProviderClient, RetryPolicy
from llmchorus.orchestration import (
    FusedResponse,
    Orchestrator,
    OptimizedPrompt,
    OrchestrationError,
    PromptClassifier,
    PromptOptimizer,
    StrategySelector,
    contributions_to_pairs,
    generate_summary,
    parse_strategy,
)
from llmchorus.utils.config import Settings, get_settings
from llmchorus.utils.console import console, print_error, print_warning

app = typer.Typer(
    name="llmchorus",
    help="llmchorus - query several LLMs at once and fuse their answers.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"llmchorus version: [bold cyan]{__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: ARG001 - Used by Typer callback
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    llmchorus - multi-provider LLM orchestration.

    Dispatches one prompt to several models in parallel and fuses the
    answers with a strategy chosen from the prompt.
    """
    pass


def build_providers(settings: Settings) -> list[ProviderClient]:
    """Create one OpenAI-compatible client per configured model.

    Raises:
        ValueError: If no API key is configured
    """
    if not settings.openai_api_key:
        raise ValueError(
            "API key not configured. Set LLMCHORUS_OPENAI_API_KEY or use --demo"
        )

    retry_policy = RetryPolicy(max_retries=settings.max_retries)
    return [
        OpenAICompatibleProvider(
            api_key=settings.openai_api_key,
            model=model,
            base_url=settings.openai_base_url,
            timeout=settings.provider_timeout,
            retry_policy=retry_policy,
        )
        for model in settings.model_list
    ]


def _print_fused_response(response: FusedResponse, verbose: bool) -> None:
    """Render a fused response with rich."""
    strategy = response.strategy.value if response.strategy else "-"
    task_type = response.task_type.value if response.task_type else "-"
    subtitle = f"strategy: {strategy} | task: {task_type} | confidence: {response.confidence:.2f}"
    console.print(Panel(response.content, title="Fused response", subtitle=subtitle))

    table = Table(title="Contributions", show_header=True, header_style="bold cyan")
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Confidence", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Latency", justify="right")
    if verbose:
        table.add_column("Response", max_width=60)

    for c in response.contributions:
        row = [c.model, f"{c.confidence:.2f}", f"{c.weight:.2f}", f"{c.latency_ms}ms"]
        if verbose:
            row.append(c.response if len(c.response) <= 60 else c.response[:57] + "...")
        table.add_row(*row)
    console.print(table)

    if response.consensus.key_points:
        console.print("[bold]Key points:[/bold]")
        for point in response.consensus.key_points:
            console.print(f"  • {point}")
    if response.consensus.disagreements:
        console.print("[bold]Disagreements:[/bold]")
        for point in response.consensus.disagreements:
            console.print(f"  • {point}")

    m = response.metrics
    console.print(
        f"[dim]Models: {m.models_used} | Latency: {m.total_latency_ms}ms | "
        f"Tokens: {m.tokens_used} | Cost: ${m.cost_estimate:.4f} | "
        f"Cached: {'yes' if m.cache_hit else 'no'}[/dim]"
    )


@app.command()
def query(
    prompt: str = typer.Argument(..., help="Prompt to send to every model"),
    strategy: str | None = typer.Option(
        None,
        "--strategy",
        "-s",
        help="Force a strategy (parallel, weighted_fusion, tournament, consensus, ...)",
    ),
    demo: bool = typer.Option(
        False, "--demo", help="Demo mode (no API calls, simulated responses)"
    ),
    summarize: bool = typer.Option(
        False,
        "--summarize",
        help="Ask the first model to compare the individual responses",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the fused response as JSON"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """
    Query all configured models and print the fused answer.

    Example:
        llmchorus query "Explain the CAP theorem" --strategy weighted_fusion
    """
    try:
        settings = get_settings()
        log_level = logging.INFO if verbose else settings.log_level.upper()
        logging.basicConfig(level=log_level, format="%(message)s", force=True)

        forced = parse_strategy(strategy)
        providers = create_demo_providers() if demo else build_providers(settings)
        if not providers:
            print_warning("No models configured. Set LLMCHORUS_MODELS")

        orchestrator = Orchestrator(providers, config=settings.to_orchestrator_config())
        if forced is not None:
            orchestrator = orchestrator.with_strategy(forced)

        response, summary = asyncio.run(_run_query(orchestrator, prompt, summarize))
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠ Interrupted by user[/yellow]")
        raise typer.Exit(code=130)
    except (OrchestrationError, LLMError, ValueError) as e:
        print_error(f"Error: {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(code=1)

    if json_output:
        if summary is None:
            typer.echo(response.model_dump_json(indent=2))
        else:
            payload = {"response": response.model_dump(mode="json"), "summary": summary}
            typer.echo(json.dumps(payload, indent=2))
        return

    _print_fused_response(response, verbose)
    if summary is not None:
        console.print(Panel(summary, title="Summary of responses"))


async def _run_query(
    orchestrator: Orchestrator, prompt: str, summarize: bool
) -> tuple[FusedResponse, str | None]:
    """Run one query and, if asked, a comparative summary with the first provider."""
    response = await orchestrator.query(prompt)
    if not summarize:
        return response, None
    summarizer = orchestrator.providers[0]
    summary = await generate_summary(summarizer, contributions_to_pairs(response))
    return response, summary


@app.command()
def classify(
    prompt: str = typer.Argument(..., help="Prompt to classify"),
) -> None:
    """
    Show the task type and strategy chosen for a prompt (no API calls).

    Example:
        llmchorus classify "Write a poem about rain"
    """
    selector = StrategySelector()
    task_type = PromptClassifier().classify(prompt)
    selected = selector.select(task_type)
    resolved = selector.resolve(selected, task_type)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_row("Task type", task_type.value)
    table.add_row("Strategy", selected.value)
    table.add_row("Runs as", resolved.value)
    console.print(table)


def _print_optimized_prompt(result: OptimizedPrompt) -> None:
    ctx = result.context
    details = [f"task: {ctx.task_type.value}", f"expertise: {ctx.expertise_level.value}"]
    if ctx.tone is not None:
        details.append(f"tone: {ctx.tone.value}")
    if ctx.desired_length is not None:
        details.append(f"length: ~{ctx.desired_length}")
    console.print(
        Panel(
            result.optimized,
            title="Optimized prompt",
            subtitle=f"{' | '.join(details)} | confidence: {result.confidence:.2f}",
        )
    )

    console.print("[bold]Techniques:[/bold]")
    for name in result.techniques_applied:
        console.print(f"  • {name}")

    table = Table(title="Variations", show_header=True, header_style="bold cyan")
    table.add_column("Strategy", style="cyan", no_wrap=True)
    table.add_column("Expected gain", justify="right")
    table.add_column("Prompt", max_width=60)
    for v in result.variations:
        table.add_row(v.strategy, f"+{v.expected_improvement:.0f}%", v.prompt)
    console.print(table)


@app.command()
def optimize(
    prompt: str = typer.Argument(..., help="Prompt to optimize"),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """
    Rewrite a prompt with the rule-based optimizer (no API calls).

    Example:
        llmchorus optimize "Explain recursion"
    """
    result = PromptOptimizer().optimize(prompt)
    if json_output:
        typer.echo(result.model_dump_json(indent=2))
    else:
        _print_optimized_prompt(result)


def run() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    run()
