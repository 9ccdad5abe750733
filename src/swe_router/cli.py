"""CLI entry point for the SWE Router."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.table import Table

from swe_router import __version__

if TYPE_CHECKING:
    from swe_router.clients.ollama import OllamaClient
    from swe_router.config import Settings
    from swe_router.engine.registry import ModelRegistry
    from swe_router.types import TaskInput

console = Console()


def _settings() -> Settings:
    from swe_router.config import Settings
    from swe_router.types import ConfigurationError

    try:
        return Settings.from_env()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(2)


def _load_registry(settings: Settings, check_backend: bool = False) -> ModelRegistry:
    """Load profiles; availability from the backend or, offline, all configured."""
    from swe_router.engine.registry import ModelRegistry
    from swe_router.types import ConfigurationError

    registry = ModelRegistry()
    try:
        registry.load_profiles(settings.config_path)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(2)

    if check_backend:
        registry.verify_availability(_client(settings).list_models())
    else:
        registry.verify_availability(p.name for p in registry.get_all_profiles())
    return registry


def _client(settings: Settings) -> OllamaClient:
    from swe_router.clients.ollama import OllamaClient

    return OllamaClient(settings.ollama_base_url, settings.ollama_api_key)


def _task_input(description: str, context: str | None, task_type: str | None) -> TaskInput:
    from swe_router.types import TaskInput

    return TaskInput(description=description, context=context, task_type=task_type)


task_options = [
    click.option("--context", "-c", default=None, help="Auxiliary context (code, logs, ...)"),
    click.option("--type", "task_type", default=None, help="Explicit task type"),
]


def with_task_options(func):  # type: ignore[no-untyped-def]
    for option in reversed(task_options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="swe-router")
def main() -> None:
    """SWE Router: route software-engineering tasks to the best-fit model."""


@main.command()
@click.option("--check", is_flag=True, help="Query the backend for availability")
def models(check: bool) -> None:
    """List configured model profiles."""
    settings = _settings()
    registry = _load_registry(settings, check_backend=check)

    table = Table(title="Model Profiles")
    table.add_column("Model", style="cyan")
    table.add_column("Provider")
    table.add_column("Domains")
    table.add_column("Max Complexity")
    table.add_column("Context", justify="right")
    table.add_column("Latency (ms)", justify="right")
    table.add_column("Available")

    for profile in registry.get_all_profiles():
        table.add_row(
            profile.name,
            profile.provider,
            ", ".join(profile.domains),
            str(profile.max_complexity),
            str(profile.context_window),
            f"{profile.estimated_latency:.0f}",
            "[green]yes[/green]" if profile.available else "[red]no[/red]",
        )

    console.print(table)
    stats = registry.get_stats()
    console.print(f"\nTotal: {stats['total']} | Available: {stats['available']}")


@main.command()
@click.argument("description")
@with_task_options
def parse(description: str, context: str | None, task_type: str | None) -> None:
    """Show how a task is characterized."""
    from swe_router.scoring.task_parser import parse_task
    from swe_router.types import ValidationError

    try:
        task = parse_task(_task_input(description, context, task_type))
    except ValidationError as e:
        console.print(f"[red]Invalid task:[/red] {e}")
        sys.exit(1)

    console.print(f"[bold]Type:[/bold] {task.task_type}")
    console.print(f"[bold]Domain:[/bold] {task.domain}")
    console.print(f"[bold]Complexity:[/bold] {task.complexity}")
    console.print(f"[bold]Capabilities:[/bold] {', '.join(task.required_capabilities)}")
    console.print(f"[bold]Context size:[/bold] {task.context_size}")


@main.command()
@click.argument("description")
@with_task_options
@click.option("--check", is_flag=True, help="Query the backend for availability")
def select(description: str, context: str | None, task_type: str | None, check: bool) -> None:
    """Rank models for a task without executing it."""
    from swe_router.scoring.selector import MAX_ALTERNATIVES, ModelSelector, build_reasoning
    from swe_router.scoring.task_parser import parse_task
    from swe_router.types import AvailabilityError, ValidationError

    settings = _settings()
    registry = _load_registry(settings, check_backend=check)

    try:
        task = parse_task(_task_input(description, context, task_type))
        ranked = ModelSelector(registry).score_all(task)
    except (ValidationError, AvailabilityError) as e:
        console.print(f"[red]{type(e).__name__}:[/red] {e}")
        sys.exit(1)

    table = Table(title=f"Ranking ({task.task_type}, {task.domain}, {task.complexity})")
    table.add_column("#", justify="right")
    table.add_column("Model", style="cyan")
    table.add_column("Score", style="bold")
    table.add_column("Domain")
    table.add_column("Complexity")
    table.add_column("Capability")
    table.add_column("Context")
    table.add_column("Latency")

    for index, item in enumerate(ranked, start=1):
        table.add_row(
            str(index),
            item.model_name,
            f"{item.score:.2f}",
            f"{item.domain_match:.0f}",
            f"{item.complexity_match:.0f}",
            f"{item.capability_match:.0f}",
            f"{item.context_match:.0f}",
            f"{item.latency_score:.0f}",
        )

    console.print(table)
    reasoning = build_reasoning(task, ranked[0], ranked[1 : 1 + MAX_ALTERNATIVES])
    console.print(f"\n[bold]Reasoning:[/bold] {reasoning}")


@main.command()
@click.argument("description")
@with_task_options
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def run(description: str, context: str | None, task_type: str | None, as_json: bool) -> None:
    """Select a model and execute the task with fallback."""
    from swe_router.engine.agent import Agent
    from swe_router.engine.formatter import to_json, to_text
    from swe_router.types import ConfigurationError

    settings = _settings()
    agent = Agent.from_settings(settings)
    try:
        result = agent.execute_task(_task_input(description, context, task_type))
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(2)

    click.echo(to_json(result) if as_json else to_text(result))

    if not result.success:
        sys.exit(1)


@main.command()
@click.option("--limit", default=20, help="Number of entries to show")
def history(limit: int) -> None:
    """Show recent runs."""
    from swe_router.storage.database import Database

    db = Database(_settings().data_dir)
    db.ensure_tables()
    rows = db.recent_runs(limit)

    if not rows:
        console.print("[dim]No run history yet. Run a task first.[/dim]")
        return

    table = Table(title="Run History")
    table.add_column("Run", style="cyan")
    table.add_column("Type")
    table.add_column("Selected")
    table.add_column("Used", style="green")
    table.add_column("Score", style="bold")
    table.add_column("OK")
    table.add_column("Date")

    for row in rows:
        table.add_row(
            row["run_id"],
            row["task_type"],
            row["selected_model"],
            row["model_used"],
            f"{row['score']:.2f}" if row["score"] is not None else "-",
            "yes" if row["success"] else "[red]no[/red]",
            str(row["created_at"])[:16],
        )

    console.print(table)


@main.command("backend-models")
@click.option("--remote", "only_remote", is_flag=True, help="Only cloud/remote models")
def backend_models(only_remote: bool) -> None:
    """List the models the Ollama server reports."""
    from swe_router.clients.ollama import filter_remote
    from swe_router.types import ChatError

    try:
        served = _client(_settings()).list_model_details()
    except ChatError as e:
        console.print(f"[red]Backend error:[/red] {e}")
        sys.exit(1)

    if not served:
        console.print("[dim]No models on the server. Pull one with `ollama pull <model>`.[/dim]")
        return

    table = Table(title="Backend Models" + (" (remote only)" if only_remote else ""))
    table.add_column("#", justify="right")
    table.add_column("Model", style="cyan")
    table.add_column("Location")
    table.add_column("Size", justify="right")
    table.add_column("Modified")

    for index, model in enumerate(filter_remote(served, only_remote), start=1):
        table.add_row(
            str(index),
            model.name,
            "remote" if model.remote else "local",
            model.size,
            str(model.modified_at or "-")[:16],
        )

    console.print(table)
    console.print(f"\nTotal on server: {len(served)}")


@main.command()
@click.argument("model")
@click.argument("message")
@click.option("--system", "-s", "system_prompt", default=None, help="System prompt")
@click.option("--temperature", "-t", type=float, default=None, help="Sampling temperature")
@click.option("--max-tokens", type=int, default=None, help="Completion token limit")
def chat(
    model: str,
    message: str,
    system_prompt: str | None,
    temperature: float | None,
    max_tokens: int | None,
) -> None:
    """Send one message straight to MODEL, bypassing selection."""
    from swe_router.types import ChatError

    try:
        response = _client(_settings()).chat(model, message, system_prompt, temperature, max_tokens)
    except ChatError as e:
        console.print(f"[red]Chat failed:[/red] {e}")
        sys.exit(1)

    click.echo(response.content or "No content returned")
