"""Shared fixtures: a scripted chat backend and raw profile builders."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import pytest

from swe_router.engine.registry import ModelRegistry
from swe_router.types import ChatError, ChatResponse


def build_profile_data(**overrides: Any) -> dict[str, Any]:
    """Raw (camelCase) profile entry as it appears in a models file."""
    data: dict[str, Any] = {
        "provider": "ollama",
        "domains": ["code"],
        "maxComplexity": "expert",
        "capabilities": ["code_generation", "reasoning"],
        "contextWindow": 100000,
        "estimatedLatency": 3000,
        "costPerToken": 0,
        "strengths": [],
        "weaknesses": [],
    }
    data.update(overrides)
    return data


class FakeChatClient:
    """
    Chat backend stub.

    ``failures`` maps model name to an error message; ``delays`` maps model
    name to seconds to sleep before answering. Every call is recorded.
    """

    def __init__(
        self,
        reply: str = "Here is the answer.",
        failures: dict[str, str] | None = None,
        delays: dict[str, float] | None = None,
        served: list[str] | None = None,
    ) -> None:
        self.reply = reply
        self.failures = failures or {}
        self.delays = delays or {}
        self.served = served
        self.calls: list[dict[str, Any]] = []

    def list_models(self) -> list[str]:
        return list(self.served or [])

    def chat(
        self,
        model: str,
        message: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatResponse:
        self.calls.append(
            {
                "model": model,
                "message": message,
                "system_prompt": system_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if model in self.delays:
            time.sleep(self.delays[model])
        if model in self.failures:
            raise ChatError(self.failures[model])
        return ChatResponse(content=f"{self.reply} ({model})", tokens_used=42)

    @property
    def models_called(self) -> list[str]:
        return [call["model"] for call in self.calls]


@pytest.fixture
def profile_data() -> Callable[..., dict[str, Any]]:
    """Builder for raw profile entries; keyword overrides replace defaults."""
    return build_profile_data


@pytest.fixture
def make_client() -> Callable[..., FakeChatClient]:
    """Factory for scripted chat backends."""
    return FakeChatClient


@pytest.fixture
def fake_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def registry() -> ModelRegistry:
    """Registry loaded from the bundled models.yaml, everything available."""
    from swe_router.config import DEFAULT_MODELS_PATH

    reg = ModelRegistry()
    reg.load_profiles(DEFAULT_MODELS_PATH)
    reg.verify_availability(p.name for p in reg.get_all_profiles())
    return reg
