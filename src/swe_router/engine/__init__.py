"""Model routing engine."""

from swe_router.engine.agent import Agent
from swe_router.engine.executor import (
    ChatClient,
    TaskExecutor,
    calculate_confidence,
    estimate_tokens,
)
from swe_router.engine.formatter import format_error, format_result, to_json, to_text
from swe_router.engine.logger import ExecutionLogger
from swe_router.engine.prompts import generate_system_prompt
from swe_router.engine.registry import ModelRegistry, validate_profile

__all__ = [
    "Agent",
    "ChatClient",
    "ExecutionLogger",
    "ModelRegistry",
    "TaskExecutor",
    "calculate_confidence",
    "estimate_tokens",
    "format_error",
    "format_result",
    "generate_system_prompt",
    "to_json",
    "to_text",
    "validate_profile",
]
