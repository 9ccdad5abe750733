"""Core data model shared by the router components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any, Final


# ═══════════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════════


class Domain(StrEnum):
    """Coarse subject-matter category of a task."""

    CODE = "code"
    MATH = "math"
    REASONING = "reasoning"
    MULTIMODAL = "multimodal"
    GENERAL = "general"


class Complexity(StrEnum):
    """Ordinal difficulty tier. Declaration order is the rank order."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return COMPLEXITY_ORDER.index(self)


COMPLEXITY_ORDER: Final[tuple[Complexity, ...]] = tuple(Complexity)


class TaskType(StrEnum):
    """Kind of software-engineering work requested."""

    CODE_GENERATION = "code_generation"
    BUG_FIXING = "bug_fixing"
    CODE_REVIEW = "code_review"
    TEST_WRITING = "test_writing"
    DOCUMENTATION = "documentation"
    ARCHITECTURE_ANALYSIS = "architecture_analysis"
    GENERAL = "general"


class LogLevel(StrEnum):
    """Step-event severity, lowest first."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


# ═══════════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════════


class SweRouterError(Exception):
    """Base class for router errors."""


class ValidationError(SweRouterError, ValueError):
    """Task input is malformed or too short."""


class ConfigurationError(SweRouterError):
    """Model profiles or settings could not be loaded."""


class AvailabilityError(SweRouterError):
    """Selection was attempted with no available models."""


class ChatError(SweRouterError):
    """The chat backend failed (transport or provider error)."""


class ExecutionTimeoutError(SweRouterError):
    """A single model attempt exceeded its time budget."""


# ═══════════════════════════════════════════════════════════════════════════
# TASKS
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class TaskInput:
    """Raw task as supplied by the caller."""

    description: str
    context: str | None = None
    task_type: str | None = None


@dataclass(frozen=True)
class TaskDescriptor:
    """Structured characterization of a free-text task."""

    description: str
    domain: Domain
    complexity: Complexity
    required_capabilities: tuple[str, ...]
    context_size: int
    task_type: TaskType

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["required_capabilities"] = list(self.required_capabilities)
        return data


# ═══════════════════════════════════════════════════════════════════════════
# MODELS
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class ModelProfile:
    """Static fitness metadata for one candidate model.

    Only ``available`` changes after load; it is owned by the registry.
    """

    name: str
    provider: str
    domains: tuple[Domain, ...]
    max_complexity: Complexity
    capabilities: tuple[str, ...]
    context_window: int
    estimated_latency: float
    cost_per_token: float
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    available: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["domains"] = [str(d) for d in self.domains]
        data["max_complexity"] = str(self.max_complexity)
        data["capabilities"] = list(self.capabilities)
        return data


@dataclass(frozen=True)
class ModelScore:
    """Weighted match of one model against one task."""

    model_name: str
    score: float
    domain_match: float
    complexity_match: float
    capability_match: float
    context_match: float
    latency_score: float
    justification: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SelectionResult:
    """Winner of a selection round plus ranked runners-up."""

    selected_model: str
    score: ModelScore
    alternatives: tuple[ModelScore, ...]
    reasoning: str


# ═══════════════════════════════════════════════════════════════════════════
# EXECUTION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ChatResponse:
    """What a chat backend returns for one completion."""

    content: str
    tokens_used: int | None = None
    execution_time: float | None = None


@dataclass(frozen=True)
class ExecutionRequest:
    """One model invocation request."""

    task: TaskDescriptor
    model_name: str
    system_prompt: str
    temperature: float = 0.7
    max_tokens: int | None = None


@dataclass
class ExecutionResult:
    """Outcome of a single execution attempt."""

    success: bool
    model_used: str
    response: str
    execution_time: int
    tokens_used: int
    confidence: int
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExecutionError:
    """Record of one failed attempt inside the fallback loop."""

    model_attempted: str
    error: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ═══════════════════════════════════════════════════════════════════════════
# LOGGING & RESULTS
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LogEntry:
    """One structured step event."""

    timestamp: int
    level: LogLevel
    step: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "level": str(self.level),
            "step": self.step,
            "details": self.details,
        }


@dataclass
class FormattedResult:
    """Final structured response handed to the caller."""

    task: TaskDescriptor
    execution: dict[str, Any]
    selection: dict[str, Any]
    result: dict[str, Any]
    logs: list[LogEntry] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return "error" not in self.result.get("metadata", {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "task": self.task.to_dict(),
            "execution": dict(self.execution),
            "selection": {
                **self.selection,
                "alternatives": [alt.to_dict() for alt in self.selection["alternatives"]],
            },
            "result": dict(self.result),
            "logs": [entry.to_dict() for entry in self.logs],
        }
