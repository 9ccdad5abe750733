"""Tests for task characterization."""

from __future__ import annotations

import pytest

from swe_router.scoring.task_parser import (
    detect_complexity,
    detect_domain,
    detect_task_type,
    extract_capabilities,
    normalize_task_type,
    parse_task,
)
from swe_router.types import (
    Complexity,
    Domain,
    TaskInput,
    TaskType,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════════════


class TestValidation:
    @pytest.mark.parametrize("description", ["", "   ", "\n\t  ", "too short", "  123456789  "])
    def test_rejects_empty_or_short(self, description: str) -> None:
        """Test empty, blank and short descriptions are rejected."""
        with pytest.raises(ValidationError):
            parse_task(TaskInput(description=description))

    def test_validation_error_is_value_error(self) -> None:
        """Test validation errors are also ValueErrors."""
        with pytest.raises(ValueError, match="too short"):
            parse_task(TaskInput(description="tiny"))

    def test_empty_message(self) -> None:
        """Test the message for a blank description."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            parse_task(TaskInput(description="    "))

    def test_exactly_ten_characters_is_valid(self) -> None:
        """Test the minimum length is inclusive."""
        task = parse_task(TaskInput(description="ten chars!"))
        assert task.description == "ten chars!"

    def test_description_is_trimmed(self) -> None:
        """Test surrounding whitespace is stripped."""
        task = parse_task(TaskInput(description="   Implement a cache layer   "))
        assert task.description == "Implement a cache layer"

    @pytest.mark.parametrize(
        ("field_name", "value"),
        [("context", 123), ("context", ["a"]), ("task_type", 5), ("task_type", {"x": 1})],
    )
    def test_rejects_non_string_optional_fields(self, field_name: str, value: object) -> None:
        """Test optional fields from JSON must be strings when present."""
        task = TaskInput(description="Implement a cache layer", **{field_name: value})  # type: ignore[arg-type]
        with pytest.raises(ValidationError, match=f"{field_name} must be a string"):
            parse_task(task)

    def test_rejects_non_string_description(self) -> None:
        """Test a numeric description is rejected as invalid input."""
        with pytest.raises(ValidationError, match="must be a string"):
            parse_task(TaskInput(description=12345678901))  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "description",
        [
            "Implement a linked list in Rust",
            "Review this pull request for security problems",
            "Deduce the logical outcome of these rules",
            "Summarize the meeting notes from yesterday",
            "Describe the image attached to this ticket",
        ],
    )
    def test_all_fields_populated_and_reasoning_present(self, description: str) -> None:
        """Test every field is set and reasoning is always required."""
        task = parse_task(TaskInput(description=description))
        assert isinstance(task.domain, Domain)
        assert isinstance(task.complexity, Complexity)
        assert isinstance(task.task_type, TaskType)
        assert task.required_capabilities
        assert "reasoning" in task.required_capabilities
        assert task.context_size == 0


# ═══════════════════════════════════════════════════════════════════════════
# TASK TYPE
# ═══════════════════════════════════════════════════════════════════════════


class TestTaskType:
    @pytest.mark.parametrize(
        ("explicit", "expected"),
        [
            ("bugfix", TaskType.BUG_FIXING),
            ("BugFix", TaskType.BUG_FIXING),
            ("docs", TaskType.DOCUMENTATION),
            ("codegen", TaskType.CODE_GENERATION),
            ("design", TaskType.ARCHITECTURE_ANALYSIS),
            ("testing", TaskType.TEST_WRITING),
            ("review", TaskType.CODE_REVIEW),
        ],
    )
    def test_synonyms(self, explicit: str, expected: TaskType) -> None:
        """Test explicit type synonyms, case-insensitively."""
        assert normalize_task_type(explicit) == expected

    def test_unknown_synonym(self) -> None:
        """Test an unknown explicit type normalizes to None."""
        assert normalize_task_type("refactoring") is None

    def test_explicit_type_overrides_text(self) -> None:
        """Test an explicit type wins over keywords."""
        assert detect_task_type("Fix the login error", "docs") == TaskType.DOCUMENTATION

    def test_unrecognized_explicit_falls_through(self) -> None:
        """Test an unrecognized explicit type falls back to keywords."""
        assert detect_task_type("Fix the login error", "nonsense") == TaskType.BUG_FIXING

    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("Generate a REST client", TaskType.CODE_GENERATION),
            ("Fix the login error", TaskType.BUG_FIXING),
            ("Audit the auth module", TaskType.CODE_REVIEW),
            ("Add unit test coverage", TaskType.TEST_WRITING),
            ("Update the readme file", TaskType.DOCUMENTATION),
            ("Explain the system layout", TaskType.ARCHITECTURE_ANALYSIS),
            ("Summarize the meeting notes", TaskType.GENERAL),
        ],
    )
    def test_text_inference(self, description: str, expected: TaskType) -> None:
        """Test task type inference from keywords."""
        assert detect_task_type(description) == expected

    def test_first_matching_group_wins(self) -> None:
        """Test keyword groups are checked in priority order."""
        # "create" (code generation) outranks "bug"
        assert detect_task_type("Create a bug tracker") == TaskType.CODE_GENERATION


# ═══════════════════════════════════════════════════════════════════════════
# DOMAIN & COMPLEXITY
# ═══════════════════════════════════════════════════════════════════════════


class TestDomain:
    def test_code_task_types_force_code(self) -> None:
        """Test code task types always map to the code domain."""
        assert detect_domain("Prove this equation holds", TaskType.BUG_FIXING) == Domain.CODE

    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("Prove this equation holds", Domain.MATH),
            ("Deduce the logical outcome", Domain.REASONING),
            ("Describe the image contents", Domain.MULTIMODAL),
            ("Explain what this script does", Domain.CODE),
            ("Summarize the meeting notes", Domain.GENERAL),
        ],
    )
    def test_keyword_scan(self, description: str, expected: Domain) -> None:
        """Test domain detection from keywords."""
        assert detect_domain(description, TaskType.GENERAL) == expected

    def test_math_checked_before_code(self) -> None:
        """Test math keywords are checked before code keywords."""
        assert detect_domain("Calculate it in a function", TaskType.GENERAL) == Domain.MATH


class TestComplexity:
    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("Optimize the query planner", Complexity.EXPERT),
            ("Design a distributed queue", Complexity.EXPERT),
            ("Integrate the payment module", Complexity.COMPLEX),
            ("Build a login page", Complexity.MODERATE),
            ("Rename a variable", Complexity.SIMPLE),
        ],
    )
    def test_keywords(self, description: str, expected: Complexity) -> None:
        """Test complexity from keywords."""
        assert detect_complexity(description) == expected

    def test_length_over_200_is_moderate(self) -> None:
        """Test long descriptions are at least moderate."""
        assert detect_complexity("x" * 201) == Complexity.MODERATE
        assert detect_complexity("x" * 200) == Complexity.SIMPLE

    def test_length_over_500_is_complex(self) -> None:
        """Test very long descriptions are complex."""
        assert detect_complexity("x" * 501) == Complexity.COMPLEX
        assert detect_complexity("x" * 500) == Complexity.MODERATE

    def test_expert_keyword_beats_length(self) -> None:
        """Test an expert keyword outranks length."""
        assert detect_complexity("optimize " + "x" * 600) == Complexity.EXPERT


# ═══════════════════════════════════════════════════════════════════════════
# CAPABILITIES & CONTEXT
# ═══════════════════════════════════════════════════════════════════════════


class TestCapabilities:
    def test_additive_in_stable_order(self) -> None:
        """Test capabilities accumulate in a fixed order."""
        caps = extract_capabilities(
            "Fix the crash in the cli tool and explain the cause",
            TaskType.BUG_FIXING,
            Domain.CODE,
        )
        assert caps == ("code_generation", "debugging", "tool_use", "explanation", "reasoning")

    def test_testing_capability(self) -> None:
        """Test test-writing tasks require testing."""
        caps = extract_capabilities("Add unit tests", TaskType.TEST_WRITING, Domain.CODE)
        assert caps == ("code_generation", "testing", "reasoning")

    def test_review_adds_code_analysis(self) -> None:
        """Test reviews require code analysis."""
        caps = extract_capabilities("Review the parser", TaskType.CODE_REVIEW, Domain.CODE)
        assert "code_analysis" in caps

    def test_reasoning_not_duplicated(self) -> None:
        """Test reasoning appears once."""
        caps = extract_capabilities("Deduce the answer", TaskType.GENERAL, Domain.REASONING)
        assert caps == ("reasoning",)

    def test_reasoning_always_present(self) -> None:
        """Test reasoning is required even with no other match."""
        caps = extract_capabilities("Summarize the notes", TaskType.GENERAL, Domain.GENERAL)
        assert caps == ("reasoning",)


def test_context_size() -> None:
    """Test context size counts context characters."""
    task = parse_task(TaskInput(description="Fix the login error", context="abc"))
    assert task.context_size == 3


def test_fibonacci_with_explicit_type() -> None:
    """Test characterization of a fibonacci task with an explicit type."""
    task = parse_task(
        TaskInput(
            description="Write a function to calculate fibonacci numbers",
            task_type="code_generation",
        )
    )
    assert task.task_type == TaskType.CODE_GENERATION
    assert task.domain == Domain.CODE
    assert {"code_generation", "reasoning"} <= set(task.required_capabilities)
    assert task.complexity in (Complexity.SIMPLE, Complexity.MODERATE)


def test_fibonacci_text_inference_follows_keyword_tables() -> None:
    """Test a fibonacci task without a type is inferred from keywords alone."""
    # No code-generation keyword appears; "calculate" is a math term
    task = parse_task(TaskInput(description="Write a function to calculate fibonacci numbers"))
    assert task.task_type == TaskType.GENERAL
    assert task.domain == Domain.MATH
    assert task.complexity == Complexity.MODERATE
    assert task.required_capabilities == ("math", "reasoning")


def test_implement_fibonacci_is_code_generation() -> None:
    """Test "implement" marks a fibonacci task as code generation."""
    task = parse_task(TaskInput(description="Implement a function to calculate fibonacci numbers"))
    assert task.task_type == TaskType.CODE_GENERATION
    assert task.domain == Domain.CODE
    assert task.required_capabilities == ("code_generation", "reasoning")
