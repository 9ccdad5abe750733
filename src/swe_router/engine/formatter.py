"""Result Formatter - Shapes pipeline output for callers."""

from __future__ import annotations

import json
from collections.abc import Sequence

from swe_router.types import (
    ExecutionResult,
    FormattedResult,
    LogEntry,
    SelectionResult,
    TaskDescriptor,
)


def format_result(
    task: TaskDescriptor,
    selection: SelectionResult,
    execution: ExecutionResult,
    logs: Sequence[LogEntry],
) -> FormattedResult:
    """Success-shaped result."""
    return FormattedResult(
        task=task,
        execution={
            "model_used": execution.model_used,
            "execution_time": execution.execution_time,
            "tokens_used": execution.tokens_used,
            "confidence": execution.confidence,
        },
        selection={
            "selected_model": selection.selected_model,
            "justification": selection.reasoning,
            "alternatives": list(selection.alternatives),
        },
        result={"response": execution.response, "metadata": dict(execution.metadata)},
        logs=list(logs),
    )


def format_error(task: TaskDescriptor, error: str, logs: Sequence[LogEntry]) -> FormattedResult:
    """Error-shaped result: empty execution and selection, error in metadata."""
    return FormattedResult(
        task=task,
        execution={
            "model_used": "none",
            "execution_time": 0,
            "tokens_used": 0,
            "confidence": 0,
        },
        selection={
            "selected_model": "none",
            "justification": "Task execution failed",
            "alternatives": [],
        },
        result={"response": "", "metadata": {"error": error, "success": False}},
        logs=list(logs),
    )


def to_json(result: FormattedResult) -> str:
    return json.dumps(result.to_dict(), indent=2, default=str)


def to_text(result: FormattedResult) -> str:
    """Human-readable rendering."""
    task = result.task
    selection = result.selection
    execution = result.execution

    parts = [
        "=== SWE Router Execution Result ===\n",
        "TASK:",
        f"  Type: {task.task_type}",
        f"  Domain: {task.domain}",
        f"  Complexity: {task.complexity}",
        f"  Description: {task.description}",
        "",
        "MODEL SELECTION:",
        f"  Selected: {selection['selected_model']}",
        f"  Justification: {selection['justification']}",
    ]
    if selection["alternatives"]:
        parts.append("  Alternatives:")
        for alt in selection["alternatives"]:
            parts.append(f"    - {alt.model_name} (score: {alt.score:.1f})")
    parts.extend(
        [
            "",
            "EXECUTION:",
            f"  Model Used: {execution['model_used']}",
            f"  Execution Time: {execution['execution_time']}ms",
            f"  Tokens Used: {execution['tokens_used']}",
            f"  Confidence: {execution['confidence']}%",
            "",
            "RESPONSE:",
            result.result["response"],
            "",
        ]
    )
    error = result.result["metadata"].get("error")
    if error:
        parts.extend(["ERROR:", f"  {error}", ""])

    return "\n".join(parts)
