"""Task characterization and model scoring."""

from .selector import ModelSelector, compare_scores, rank_scores, score_model
from .task_parser import parse_task

__all__ = [
    "parse_task",
    "score_model",
    "compare_scores",
    "rank_scores",
    "ModelSelector",
]
