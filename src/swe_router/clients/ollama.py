"""Ollama chat client (OpenAI-compatible chat completions endpoint)."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

import httpx

from swe_router.types import ChatError, ChatResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_TEMPERATURE = 0.7

# Name fragments that mark a model as served from a cloud/remote proxy
REMOTE_NAME_MARKERS = ("cloud", "online", "api", "remote")

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


@dataclass(frozen=True)
class BackendModel:
    """One model as reported by the server's tag listing."""

    name: str
    size: str
    modified_at: str | None
    remote: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def format_size(num_bytes: int | float | None) -> str:
    """Human-readable byte count, one decimal (``4.7 GB``)."""
    if not num_bytes:
        return "0 B"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 1):g} {SIZE_UNITS[unit]}"


def is_remote_model(name: str) -> bool:
    """Naming heuristic: proxy markers, or an untagged llama3 name."""
    if any(marker in name for marker in REMOTE_NAME_MARKERS):
        return True
    return "llama3" in name and ":" not in name


def filter_remote(models: Sequence[BackendModel], only_remote: bool) -> list[BackendModel]:
    """Remote models when asked for; the full list if that would leave nothing."""
    if not only_remote:
        return list(models)
    remote = [model for model in models if model.remote]
    return remote or list(models)


class OllamaClient:
    """
    Talks to an Ollama server, optionally behind a bearer-auth proxy.

    Endpoints:
    - GET  {base_url}/api/tags              list installed models
    - POST {base_url}/v1/chat/completions   non-streaming chat
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        request_timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or os.environ.get("OLLAMA_BASE_URL") or DEFAULT_BASE_URL).rstrip(
            "/"
        )
        self.api_key = api_key if api_key is not None else os.environ.get("OLLAMA_API_KEY", "")
        self.request_timeout = request_timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.request_timeout,
            transport=self._transport,
        )

    def _error(self, prefix: str, e: Exception) -> ChatError:
        if isinstance(e, httpx.HTTPStatusError):
            return ChatError(
                f"{prefix}: Ollama API error "
                f"{e.response.status_code} {e.response.reason_phrase}"
            )
        return ChatError(f"{prefix}: {e}")

    def list_model_details(self) -> list[BackendModel]:
        """
        Every model the server reports, with size and a remote flag.

        Raises:
            ChatError: the server is unreachable or answered with an error
        """
        try:
            with self._client() as client:
                response = client.get("/api/tags")
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise self._error("Failed to list Ollama models", e) from e

        return [
            BackendModel(
                name=model["name"],
                size=format_size(model.get("size")),
                modified_at=model.get("modified_at"),
                remote=is_remote_model(model["name"]),
            )
            for model in data.get("models", [])
            if "name" in model
        ]

    def list_models(self) -> list[str]:
        """Names of models on the server; empty list if the server is unreachable."""
        try:
            return [model.name for model in self.list_model_details()]
        except ChatError as e:
            logger.warning("%s", e)
            return []

    def chat(
        self,
        model: str,
        message: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatResponse:
        """
        Send one non-streaming chat request.

        Raises:
            ChatError: on transport failure, non-2xx status or undecodable body
        """
        start = time.monotonic()
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": message})

        body: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": False,
            "options": {
                "temperature": DEFAULT_TEMPERATURE if temperature is None else temperature
            },
        }
        if max_tokens is not None:
            body["max_tokens"] = max_tokens

        try:
            with self._client() as client:
                response = client.post("/v1/chat/completions", json=body)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise self._error(f"Failed to chat with model {model}", e) from e

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        tokens_used = (data.get("usage") or {}).get("total_tokens")

        return ChatResponse(
            content=content,
            tokens_used=tokens_used,
            execution_time=(time.monotonic() - start) * 1000,
        )

    def test_connection(self) -> bool:
        """True when the server lists at least one model."""
        return len(self.list_models()) > 0
