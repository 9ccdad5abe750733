"""Task Executor - Runs a request against a model with a timeout and ordered fallback."""

from __future__ import annotations

import math
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import replace
from typing import Any, Protocol

from swe_router.types import (
    ChatResponse,
    ExecutionError,
    ExecutionRequest,
    ExecutionResult,
    ExecutionTimeoutError,
)

DEFAULT_TIMEOUT_MS = 60_000
DEFAULT_TEMPERATURE = 0.7

# Confidence heuristic
BASE_CONFIDENCE = 50
LONG_RESPONSE_CHARS = 1000
VERY_LONG_RESPONSE_CHARS = 2000
DELIBERATE_TIME_RANGE_MS = (5000, 30000)
HASTY_TIME_MS = 1000


class ChatClient(Protocol):
    """Chat capability consumed by the executor. Must raise on any failure."""

    def chat(
        self,
        model: str,
        message: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatResponse: ...


def now_ms() -> int:
    return int(time.time() * 1000)


def resolve_temperature(temperature: float | None) -> float:
    """Explicit values, including 0.0, are kept; only a missing one gets the default."""
    return DEFAULT_TEMPERATURE if temperature is None else temperature


def estimate_tokens(text: str) -> int:
    """Rough approximation: ~4 chars per token."""
    return math.ceil(len(text) / 4)


def calculate_confidence(response: str, execution_time: float) -> int:
    """Heuristic 0-100 confidence from response shape and timing."""
    confidence = BASE_CONFIDENCE

    if len(response) > LONG_RESPONSE_CHARS:
        confidence += 10
    if len(response) > VERY_LONG_RESPONSE_CHARS:
        confidence += 10

    low, high = DELIBERATE_TIME_RANGE_MS
    if low < execution_time < high:
        confidence += 10
    if execution_time < HASTY_TIME_MS:
        confidence -= 10

    if "```" in response:
        confidence += 10

    lower = response.lower()
    if "because" in lower or "reason" in lower:
        confidence += 5

    return max(0, min(100, confidence))


def format_message(request: ExecutionRequest) -> str:
    """User message for the model. Context travels in the system prompt."""
    return request.task.description


class TaskExecutor:
    """
    Executes requests against a chat backend.

    Each attempt is bounded by a timeout. A timed-out call is abandoned, not
    cancelled: the backend may still finish it, but its result is ignored.
    Fallback candidates are tried strictly one after another.
    """

    def __init__(self, client: ChatClient, timeout: int = DEFAULT_TIMEOUT_MS) -> None:
        self.client = client
        self.default_timeout = timeout

    def _chat_with_timeout(self, request: ExecutionRequest, timeout_ms: int) -> ChatResponse:
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="swe-router-chat")
        try:
            future = pool.submit(
                self.client.chat,
                request.model_name,
                format_message(request),
                request.system_prompt,
                resolve_temperature(request.temperature),
                request.max_tokens,
            )
            try:
                return future.result(timeout=timeout_ms / 1000)
            except FutureTimeoutError as e:
                raise ExecutionTimeoutError(f"Execution timeout after {timeout_ms}ms") from e
        finally:
            pool.shutdown(wait=False)

    def _metadata(self, request: ExecutionRequest) -> dict[str, Any]:
        return {
            "taskType": str(request.task.task_type),
            "domain": str(request.task.domain),
            "complexity": str(request.task.complexity),
        }

    def execute_task(self, request: ExecutionRequest, timeout: int | None = None) -> ExecutionResult:
        """
        Run one attempt against ``request.model_name``.

        Failures are reported through ``success=False`` with the message in
        ``metadata["error"]``; this method does not raise for backend errors.
        """
        actual_timeout = timeout or self.default_timeout
        start = time.monotonic()

        try:
            response = self._chat_with_timeout(request, actual_timeout)
        except Exception as e:
            return ExecutionResult(
                success=False,
                model_used=request.model_name,
                response="",
                execution_time=int((time.monotonic() - start) * 1000),
                tokens_used=0,
                confidence=0,
                metadata={"error": str(e) or type(e).__name__, **self._metadata(request)},
            )

        execution_time = int((time.monotonic() - start) * 1000)
        content = response.content or ""
        temperature = resolve_temperature(request.temperature)

        return ExecutionResult(
            success=True,
            model_used=request.model_name,
            response=content,
            execution_time=execution_time,
            tokens_used=response.tokens_used or estimate_tokens(content),
            confidence=calculate_confidence(content, execution_time),
            metadata={**self._metadata(request), "temperature": temperature},
        )

    def execute_with_fallback(
        self,
        request: ExecutionRequest,
        fallback_models: Sequence[str],
        timeout: int | None = None,
    ) -> ExecutionResult | list[ExecutionError]:
        """
        Try the primary model, then each fallback in order.

        Returns:
            The first successful ExecutionResult, or one ExecutionError per
            attempted model when every candidate failed. Never raises for
            exhausted fallback.
        """
        errors: list[ExecutionError] = []

        for model in [request.model_name, *fallback_models]:
            try:
                result = self.execute_task(replace(request, model_name=model), timeout)
            except Exception as e:
                errors.append(ExecutionError(model_attempted=model, error=str(e), timestamp=now_ms()))
                continue

            if result.success:
                return result

            errors.append(
                ExecutionError(
                    model_attempted=model,
                    error=str(result.metadata.get("error") or "Execution failed"),
                    timestamp=now_ms(),
                )
            )

        return errors
