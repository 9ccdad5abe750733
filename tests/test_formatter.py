"""Tests for result shaping."""

from __future__ import annotations

import json

import pytest

from swe_router.engine.formatter import format_error, format_result, to_json, to_text
from swe_router.types import (
    Complexity,
    Domain,
    ExecutionResult,
    LogEntry,
    LogLevel,
    ModelScore,
    SelectionResult,
    TaskDescriptor,
    TaskType,
)


@pytest.fixture
def task() -> TaskDescriptor:
    return TaskDescriptor(
        description="Fix the login error",
        domain=Domain.CODE,
        complexity=Complexity.SIMPLE,
        required_capabilities=("code_generation", "debugging", "reasoning"),
        context_size=0,
        task_type=TaskType.BUG_FIXING,
    )


@pytest.fixture
def selection() -> SelectionResult:
    best = ModelScore("coder", 91.5, 100, 100, 100, 100, 50, "Perfect domain match")
    alt = ModelScore("general", 62.5, 50, 100, 33.33, 100, 80, "Partial domain match")
    return SelectionResult("coder", best, (alt,), "Selected coder with score 91.5/100.")


@pytest.fixture
def logs() -> list[LogEntry]:
    return [LogEntry(1_700_000_000_000, LogLevel.INFO, "Model selected", {"model": "coder"})]


def test_format_result(task, selection, logs) -> None:  # type: ignore[no-untyped-def]
    """Test the success shape."""
    execution = ExecutionResult(True, "coder", "patched", 1200, 30, 55, {"domain": "code"})
    result = format_result(task, selection, execution, logs)

    assert result.success is True
    assert result.execution == {
        "model_used": "coder",
        "execution_time": 1200,
        "tokens_used": 30,
        "confidence": 55,
    }
    assert result.selection["selected_model"] == "coder"
    assert result.selection["justification"] == selection.reasoning
    assert [a.model_name for a in result.selection["alternatives"]] == ["general"]
    assert result.result == {"response": "patched", "metadata": {"domain": "code"}}
    assert result.logs == logs


def test_format_error(task, logs) -> None:  # type: ignore[no-untyped-def]
    """Test the error shape."""
    result = format_error(task, "All models failed: coder: boom", logs)

    assert result.success is False
    assert result.task == task
    assert result.execution == {
        "model_used": "none",
        "execution_time": 0,
        "tokens_used": 0,
        "confidence": 0,
    }
    assert result.selection == {
        "selected_model": "none",
        "justification": "Task execution failed",
        "alternatives": [],
    }
    assert result.result["response"] == ""
    assert result.result["metadata"] == {
        "error": "All models failed: coder: boom",
        "success": False,
    }


def test_to_json(task, selection, logs) -> None:  # type: ignore[no-untyped-def]
    """Test JSON rendering round-trips the structure."""
    execution = ExecutionResult(True, "coder", "patched", 1200, 30, 55, {})
    data = json.loads(to_json(format_result(task, selection, execution, logs)))

    assert data["task"]["task_type"] == "bug_fixing"
    assert data["task"]["required_capabilities"] == ["code_generation", "debugging", "reasoning"]
    assert data["selection"]["alternatives"][0]["model_name"] == "general"
    assert data["logs"][0] == {
        "timestamp": 1_700_000_000_000,
        "level": "INFO",
        "step": "Model selected",
        "details": {"model": "coder"},
    }


def test_to_text_success(task, selection, logs) -> None:  # type: ignore[no-untyped-def]
    """Test the text rendering of a success."""
    execution = ExecutionResult(True, "coder", "patched", 1200, 30, 55, {})
    text = to_text(format_result(task, selection, execution, logs))

    assert text.startswith("=== SWE Router Execution Result ===")
    for section in ("TASK:", "MODEL SELECTION:", "EXECUTION:", "RESPONSE:"):
        assert section in text
    assert "    - general (score: 62.5)" in text
    assert "Execution Time: 1200ms" in text
    assert "ERROR:" not in text


def test_to_text_error(task, logs) -> None:  # type: ignore[no-untyped-def]
    """Test the text rendering of a failure."""
    text = to_text(format_error(task, "boom", logs))
    assert "Selected: none" in text
    assert "ERROR:\n  boom" in text
