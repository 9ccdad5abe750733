#!/usr/bin/env python3
"""Model Selector - Weighted matching of model profiles against a task.

Score = domain (0.30) + complexity (0.25) + capability (0.25)
        + context (0.10) + latency (0.10), every component on 0-100.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from functools import cmp_to_key
from typing import TYPE_CHECKING, Final

from swe_router.types import (
    AvailabilityError,
    Domain,
    ModelProfile,
    ModelScore,
    SelectionResult,
    TaskDescriptor,
)

if TYPE_CHECKING:
    from swe_router.engine.registry import ModelRegistry

# ═══════════════════════════════════════════════════════════════════════════
# CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════

DOMAIN_WEIGHT: Final[float] = 0.30
COMPLEXITY_WEIGHT: Final[float] = 0.25
CAPABILITY_WEIGHT: Final[float] = 0.25
CONTEXT_WEIGHT: Final[float] = 0.10
LATENCY_WEIGHT: Final[float] = 0.10

# Points lost per complexity tier the model falls short
COMPLEXITY_GAP_PENALTY: Final[int] = 30

# Latency normalization bounds (ms)
MIN_LATENCY: Final[float] = 1000.0
MAX_LATENCY: Final[float] = 10000.0

# Scores closer than this are ties
TIE_EPSILON: Final[float] = 0.01

MAX_ALTERNATIVES: Final[int] = 3


def round2(value: float) -> float:
    """Round half up to 2 decimals."""
    return math.floor(value * 100 + 0.5) / 100


# ═══════════════════════════════════════════════════════════════════════════
# COMPONENT SCORES
# ═══════════════════════════════════════════════════════════════════════════


def domain_match(task: TaskDescriptor, profile: ModelProfile) -> float:
    if task.domain in profile.domains:
        return 100.0
    if task.domain == Domain.GENERAL or Domain.GENERAL in profile.domains:
        return 50.0
    # Code models can partially handle reasoning
    if task.domain == Domain.REASONING and Domain.CODE in profile.domains:
        return 40.0
    return 0.0


def complexity_match(task: TaskDescriptor, profile: ModelProfile) -> float:
    task_rank = task.complexity.rank
    model_rank = profile.max_complexity.rank
    if model_rank >= task_rank:
        return 100.0
    gap = task_rank - model_rank
    return float(max(0, 100 - gap * COMPLEXITY_GAP_PENALTY))


def capability_match(task: TaskDescriptor, profile: ModelProfile) -> float:
    required = set(task.required_capabilities)
    if not required:
        return 100.0
    matched = required & set(profile.capabilities)
    return len(matched) / len(required) * 100


def context_match(task: TaskDescriptor, profile: ModelProfile) -> float:
    size = len(task.description) + task.context_size
    window = profile.context_window
    if size <= window * 0.5:
        return 100.0
    if size <= window * 0.8:
        return 80.0
    if size <= window:
        return 60.0
    # Exceeds the window; nothing is truncated here
    return 0.0


def latency_score(profile: ModelProfile) -> float:
    clamped = min(max(profile.estimated_latency, MIN_LATENCY), MAX_LATENCY)
    score = 100 - (clamped - MIN_LATENCY) / (MAX_LATENCY - MIN_LATENCY) * 100
    return max(0.0, min(100.0, score))


def justify(domain: float, complexity: float, capability: float) -> str:
    """Three categorical buckets joined by commas."""
    parts: list[str] = []

    if domain >= 100:
        parts.append("Perfect domain match")
    elif domain >= 50:
        parts.append("Partial domain match")
    else:
        parts.append("Limited domain match")

    if complexity >= 100:
        parts.append("can handle required complexity")
    elif complexity >= 70:
        parts.append("mostly suitable for complexity level")
    else:
        parts.append("may struggle with task complexity")

    if capability >= 100:
        parts.append("has all required capabilities")
    elif capability >= 70:
        parts.append("has most required capabilities")
    else:
        parts.append("missing some capabilities")

    return ", ".join(parts)


def score_model(task: TaskDescriptor, profile: ModelProfile) -> ModelScore:
    """Score one profile against a task."""
    domain = domain_match(task, profile)
    complexity = complexity_match(task, profile)
    capability = capability_match(task, profile)
    context = context_match(task, profile)
    latency = latency_score(profile)

    total = (
        domain * DOMAIN_WEIGHT
        + complexity * COMPLEXITY_WEIGHT
        + capability * CAPABILITY_WEIGHT
        + context * CONTEXT_WEIGHT
        + latency * LATENCY_WEIGHT
    )

    return ModelScore(
        model_name=profile.name,
        score=round2(total),
        domain_match=round2(domain),
        complexity_match=round2(complexity),
        capability_match=round2(capability),
        context_match=round2(context),
        latency_score=round2(latency),
        justification=justify(domain, complexity, capability),
    )


# ═══════════════════════════════════════════════════════════════════════════
# RANKING
# ═══════════════════════════════════════════════════════════════════════════


def compare_scores(a: ModelScore, b: ModelScore) -> float:
    """Order by total score descending.

    Near-ties are ordered by ascending ``latency_score``, so the candidate
    with the *lower* latency score (the slower model) ranks first.
    """
    if abs(a.score - b.score) < TIE_EPSILON:
        return a.latency_score - b.latency_score
    return b.score - a.score


def rank_scores(scores: Sequence[ModelScore]) -> list[ModelScore]:
    """Stable sort with the tie-aware comparator."""
    return sorted(scores, key=cmp_to_key(compare_scores))


def build_reasoning(
    task: TaskDescriptor, selected: ModelScore, alternatives: Sequence[ModelScore]
) -> str:
    parts = [
        f"Selected {selected.model_name} with score {selected.score:.1f}/100",
        f"Task characteristics: {task.domain} domain, {task.complexity} complexity, "
        f"requires [{', '.join(task.required_capabilities)}]",
        f"Scoring breakdown: {selected.justification}",
    ]
    if alternatives:
        alt_list = ", ".join(f"{alt.model_name} ({alt.score:.1f})" for alt in alternatives)
        parts.append(f"Alternative models considered: {alt_list}")
    return ". ".join(parts) + "."


class ModelSelector:
    """Selects the best available model from a registry for a task."""

    def __init__(self, registry: ModelRegistry) -> None:
        self.registry = registry

    def score_all(self, task: TaskDescriptor) -> list[ModelScore]:
        """Score and rank every available profile.

        Raises:
            AvailabilityError: the registry has no available profiles
        """
        profiles = self.registry.get_available_profiles()
        if not profiles:
            raise AvailabilityError(
                "No models available. Check that the model backend is running "
                "and models are configured."
            )
        return rank_scores([score_model(task, profile) for profile in profiles])

    def select_model(self, task: TaskDescriptor) -> SelectionResult:
        """Pick the top-ranked model; the next three become alternatives."""
        ranked = self.score_all(task)
        selected = ranked[0]
        alternatives = tuple(ranked[1 : 1 + MAX_ALTERNATIVES])

        return SelectionResult(
            selected_model=selected.model_name,
            score=selected,
            alternatives=alternatives,
            reasoning=build_reasoning(task, selected, alternatives),
        )
