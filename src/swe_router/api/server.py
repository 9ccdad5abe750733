"""FastAPI server for programmatic router access."""

from __future__ import annotations

import threading
import time
from typing import Any

import click
from fastapi import FastAPI

from swe_router import __version__
from swe_router.clients.ollama import filter_remote
from swe_router.config import Settings
from swe_router.engine.agent import Agent
from swe_router.scoring.task_parser import parse_task
from swe_router.types import SweRouterError, TaskInput

app = FastAPI(
    title="SWE Router API",
    version=__version__,
    description="Route software-engineering tasks to the best-fit model",
)

_start_time = time.monotonic()
_agent: Agent | None = None
_agent_lock = threading.Lock()


def get_agent() -> Agent:
    """Process-wide agent, built from the environment on first use."""
    global _agent
    with _agent_lock:
        if _agent is None:
            _agent = Agent.from_settings(Settings.from_env())
        return _agent


def set_agent(agent: Agent | None) -> None:
    """Install a pre-built agent (or reset with None)."""
    global _agent
    with _agent_lock:
        _agent = agent


def _task_input(request: dict[str, Any]) -> TaskInput:
    # Field types are checked by parse_task
    return TaskInput(
        description=request.get("description"),
        context=request.get("context"),
        task_type=request.get("task_type"),
    )


@app.get("/api/health")
async def health() -> dict[str, Any]:
    """Health check."""
    uptime = time.monotonic() - _start_time
    return {"status": "ok", "version": __version__, "uptime_seconds": round(uptime, 1)}


@app.get("/api/models")
def models() -> dict[str, Any]:
    """Configured profiles with availability."""
    agent = get_agent()
    try:
        agent.initialize()
    except SweRouterError as e:
        return {"error": str(e)}
    profiles = [p.to_dict() for p in agent.registry.get_all_profiles()]
    return {"models": profiles, **agent.registry.get_stats()}


@app.post("/api/parse")
async def parse(request: dict[str, Any]) -> dict[str, Any]:
    """Characterize a task without selecting a model."""
    try:
        task = parse_task(_task_input(request))
    except SweRouterError as e:
        return {"error": str(e)}
    return {"task": task.to_dict()}


@app.post("/api/select")
def select(request: dict[str, Any]) -> dict[str, Any]:
    """Characterize a task and rank available models."""
    agent = get_agent()
    try:
        agent.initialize()
        task = parse_task(_task_input(request))
        selection = agent.selector.select_model(task)
    except SweRouterError as e:
        return {"error": str(e)}
    return {
        "task": task.to_dict(),
        "selected_model": selection.selected_model,
        "score": selection.score.to_dict(),
        "alternatives": [alt.to_dict() for alt in selection.alternatives],
        "reasoning": selection.reasoning,
    }


@app.post("/api/execute")
def execute(request: dict[str, Any]) -> dict[str, Any]:
    """Run the full pipeline."""
    agent = get_agent()
    try:
        result = agent.execute_task(_task_input(request))
    except SweRouterError as e:
        return {"error": str(e)}
    return result.to_dict()


@app.get("/api/backend/models")
def backend_models(only_remote: bool = False) -> dict[str, Any]:
    """Raw model list of the chat backend, optionally only remote models."""
    list_details = getattr(get_agent().client, "list_model_details", None)
    if not callable(list_details):
        return {"error": "Backend does not support listing models"}
    try:
        served = list_details()
    except SweRouterError as e:
        return {"error": str(e)}

    shown = filter_remote(served, only_remote)
    return {
        "total": len(served),
        "only_remote": only_remote,
        "models": [model.to_dict() for model in shown],
    }


@app.post("/api/chat")
def chat(request: dict[str, Any]) -> dict[str, Any]:
    """Chat directly with a named model, bypassing selection."""
    model = request.get("model")
    message = request.get("message")
    system_prompt = request.get("system_prompt")
    temperature = request.get("temperature")
    max_tokens = request.get("max_tokens")

    if not isinstance(model, str) or not model.strip():
        return {"error": "model is required"}
    if not isinstance(message, str) or not message.strip():
        return {"error": "message is required"}
    if system_prompt is not None and not isinstance(system_prompt, str):
        return {"error": "system_prompt must be a string"}
    if temperature is not None and (
        isinstance(temperature, bool) or not isinstance(temperature, (int, float))
    ):
        return {"error": "temperature must be a number"}
    if max_tokens is not None and (
        isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0
    ):
        return {"error": "max_tokens must be a positive integer"}

    try:
        response = get_agent().client.chat(
            model, message, system_prompt, temperature, max_tokens
        )
    except SweRouterError as e:
        return {"error": str(e)}
    return {
        "model": model,
        "content": response.content,
        "tokens_used": response.tokens_used,
        "execution_time": response.execution_time,
    }


@click.command()
@click.option("--port", default=3850, help="Port to listen on")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
def main(port: int, host: str) -> None:
    """Start the SWE Router API server."""
    import uvicorn

    uvicorn.run(app, host=host, port=port)
