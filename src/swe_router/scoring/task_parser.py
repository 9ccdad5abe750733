#!/usr/bin/env python3
"""Task Parser - Pattern-based characterization of free-text tasks.

Derives task type, domain, complexity, required capabilities and context size
from an unstructured description. Every axis is an ordered rule table:
rules are checked top-down and the first match wins.
"""

from __future__ import annotations

from typing import Final

from swe_router.types import (
    Complexity,
    Domain,
    TaskDescriptor,
    TaskInput,
    TaskType,
    ValidationError,
)

MIN_DESCRIPTION_LENGTH: Final[int] = 10

# ═══════════════════════════════════════════════════════════════════════════
# RULE TABLES
# ═══════════════════════════════════════════════════════════════════════════

TASK_TYPE_SYNONYMS: Final[dict[str, TaskType]] = {
    "code_generation": TaskType.CODE_GENERATION,
    "codegen": TaskType.CODE_GENERATION,
    "generate": TaskType.CODE_GENERATION,
    "bug_fixing": TaskType.BUG_FIXING,
    "bugfix": TaskType.BUG_FIXING,
    "fix": TaskType.BUG_FIXING,
    "code_review": TaskType.CODE_REVIEW,
    "review": TaskType.CODE_REVIEW,
    "test_writing": TaskType.TEST_WRITING,
    "test": TaskType.TEST_WRITING,
    "testing": TaskType.TEST_WRITING,
    "documentation": TaskType.DOCUMENTATION,
    "docs": TaskType.DOCUMENTATION,
    "architecture_analysis": TaskType.ARCHITECTURE_ANALYSIS,
    "architecture": TaskType.ARCHITECTURE_ANALYSIS,
    "design": TaskType.ARCHITECTURE_ANALYSIS,
}

TASK_TYPE_RULES: Final[list[tuple[list[str], TaskType]]] = [
    (["generate", "create", "write code", "implement"], TaskType.CODE_GENERATION),
    (["bug", "fix", "error", "issue", "debug"], TaskType.BUG_FIXING),
    (["review", "analyze code", "check code", "audit"], TaskType.CODE_REVIEW),
    (["test", "unit test", "testing", "test case"], TaskType.TEST_WRITING),
    (["document", "documentation", "readme", "doc"], TaskType.DOCUMENTATION),
    (["architecture", "design", "structure", "system"], TaskType.ARCHITECTURE_ANALYSIS),
]

# Task types that imply the code domain regardless of wording
CODE_TASK_TYPES: Final[frozenset[TaskType]] = frozenset(
    {
        TaskType.CODE_GENERATION,
        TaskType.BUG_FIXING,
        TaskType.CODE_REVIEW,
        TaskType.TEST_WRITING,
    }
)

DOMAIN_RULES: Final[list[tuple[list[str], Domain]]] = [
    (["math", "calculate", "formula", "equation", "proof"], Domain.MATH),
    (["reason", "logic", "deduce", "infer", "conclude"], Domain.REASONING),
    (["image", "video", "audio", "visual", "diagram"], Domain.MULTIMODAL),
    (["code", "function", "class", "api", "program", "script"], Domain.CODE),
]

# (keywords, length threshold, tier); a tier matches on keyword OR length
COMPLEXITY_RULES: Final[list[tuple[list[str], int | None, Complexity]]] = [
    (
        [
            "complex",
            "advanced",
            "sophisticated",
            "distributed",
            "scalable",
            "high-performance",
            "optimize",
            "refactor entire",
            "architectural",
        ],
        None,
        Complexity.EXPERT,
    ),
    (
        ["multiple", "integrate", "system", "framework", "algorithm", "design pattern"],
        500,
        Complexity.COMPLEX,
    ),
    (
        ["implement", "create", "build", "develop", "function", "class"],
        200,
        Complexity.MODERATE,
    ),
]

DOMAIN_CAPABILITIES: Final[dict[Domain, str]] = {
    Domain.CODE: "code_generation",
    Domain.MATH: "math",
    Domain.REASONING: "reasoning",
    Domain.MULTIMODAL: "multimodal",
}

TASK_TYPE_CAPABILITIES: Final[dict[TaskType, str]] = {
    TaskType.TEST_WRITING: "testing",
    TaskType.BUG_FIXING: "debugging",
}

KEYWORD_CAPABILITIES: Final[list[tuple[list[str], str]]] = [
    (["tool", "command", "terminal", "cli"], "tool_use"),
    (["analyze", "review", "audit"], "code_analysis"),
    (["explain", "document", "describe"], "explanation"),
]


# ═══════════════════════════════════════════════════════════════════════════
# DETECTION
# ═══════════════════════════════════════════════════════════════════════════


def matches_any(text: str, keywords: list[str]) -> bool:
    """Substring match of any keyword in already-lowercased text."""
    return any(keyword in text for keyword in keywords)


def normalize_task_type(value: str) -> TaskType | None:
    """Map an explicit task-type string through the synonym table."""
    return TASK_TYPE_SYNONYMS.get(value.strip().lower())


def detect_task_type(description: str, explicit: str | None = None) -> TaskType:
    if explicit:
        normalized = normalize_task_type(explicit)
        if normalized is not None:
            return normalized

    lower = description.lower()
    for keywords, task_type in TASK_TYPE_RULES:
        if matches_any(lower, keywords):
            return task_type
    return TaskType.GENERAL


def detect_domain(description: str, task_type: TaskType) -> Domain:
    if task_type in CODE_TASK_TYPES:
        return Domain.CODE

    lower = description.lower()
    for keywords, domain in DOMAIN_RULES:
        if matches_any(lower, keywords):
            return domain
    return Domain.GENERAL


def detect_complexity(description: str) -> Complexity:
    lower = description.lower()
    length = len(description)
    for keywords, threshold, tier in COMPLEXITY_RULES:
        if matches_any(lower, keywords):
            return tier
        if threshold is not None and length > threshold:
            return tier
    return Complexity.SIMPLE


def extract_capabilities(description: str, task_type: TaskType, domain: Domain) -> tuple[str, ...]:
    """Build the capability set additively, in a stable order."""
    capabilities: dict[str, None] = {}
    lower = description.lower()

    if domain in DOMAIN_CAPABILITIES:
        capabilities[DOMAIN_CAPABILITIES[domain]] = None
    if task_type in TASK_TYPE_CAPABILITIES:
        capabilities[TASK_TYPE_CAPABILITIES[task_type]] = None
    for keywords, capability in KEYWORD_CAPABILITIES:
        if matches_any(lower, keywords):
            capabilities[capability] = None

    # Every task needs reasoning
    capabilities["reasoning"] = None
    return tuple(capabilities)


def validate_description(description: str | None) -> str:
    """Return the trimmed description or raise ValidationError."""
    if description is not None and not isinstance(description, str):
        raise ValidationError("Task description must be a string")
    if not description or not description.strip():
        raise ValidationError("Task description cannot be empty or contain only whitespace")

    trimmed = description.strip()
    if len(trimmed) < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            "Task description is too short. Please provide more detail "
            f"(minimum {MIN_DESCRIPTION_LENGTH} characters)"
        )
    return trimmed


def validate_optional_text(name: str, value: object) -> None:
    """Optional fields arrive from JSON untyped; only strings are usable."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{name} must be a string, got {type(value).__name__}")


# ═══════════════════════════════════════════════════════════════════════════
# MAIN ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════


def parse_task(task: TaskInput) -> TaskDescriptor:
    """Characterize a raw task.

    Args:
        task: Raw description, optional auxiliary context and optional explicit type

    Returns:
        TaskDescriptor with all six attributes populated

    Raises:
        ValidationError: description empty, whitespace-only or under 10 characters,
            or a field that is not a string
    """
    validate_optional_text("context", task.context)
    validate_optional_text("task_type", task.task_type)
    description = validate_description(task.description)
    task_type = detect_task_type(description, task.task_type)
    domain = detect_domain(description, task_type)

    return TaskDescriptor(
        description=description,
        domain=domain,
        complexity=detect_complexity(description),
        required_capabilities=extract_capabilities(description, task_type, domain),
        context_size=len(task.context) if task.context else 0,
        task_type=task_type,
    )
