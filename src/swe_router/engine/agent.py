"""Agent - Parse, select, prompt, execute with fallback, format."""

from __future__ import annotations

import threading
import uuid
from pathlib import Path

from swe_router.config import DEFAULT_MODELS_PATH, Settings
from swe_router.engine.executor import DEFAULT_TIMEOUT_MS, ChatClient, TaskExecutor
from swe_router.engine.formatter import format_error, format_result
from swe_router.engine.logger import ExecutionLogger
from swe_router.engine.prompts import generate_system_prompt
from swe_router.engine.registry import ModelRegistry
from swe_router.scoring.selector import ModelSelector
from swe_router.scoring.task_parser import parse_task
from swe_router.storage.database import Database
from swe_router.types import (
    Complexity,
    Domain,
    ExecutionRequest,
    FormattedResult,
    LogLevel,
    SweRouterError,
    TaskDescriptor,
    TaskInput,
    TaskType,
)


def placeholder_task(task: TaskInput) -> TaskDescriptor:
    """Descriptor used in error results when the input could not be parsed."""
    description = task.description if isinstance(task.description, str) else ""
    context = task.context if isinstance(task.context, str) else ""
    return TaskDescriptor(
        description=description.strip(),
        domain=Domain.GENERAL,
        complexity=Complexity.SIMPLE,
        required_capabilities=("reasoning",),
        context_size=len(context),
        task_type=TaskType.GENERAL,
    )


class Agent:
    """
    Routes one software-engineering task to the best-fit model.

    Workflow:
    1. Parse task into a descriptor
    2. Score available models and select one
    3. Generate the system prompt
    4. Execute with fallback across ranked alternatives
    5. Format the result (and record it, when a database is attached)

    ``execute_task`` always returns a structurally valid FormattedResult;
    failures come back error-shaped instead of raising.
    """

    def __init__(
        self,
        client: ChatClient,
        config_path: Path | str | None = None,
        registry: ModelRegistry | None = None,
        log_level: LogLevel | str = LogLevel.INFO,
        timeout: int = DEFAULT_TIMEOUT_MS,
        temperature: float = 0.7,
        database: Database | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self.client = client
        self.config_path = Path(config_path) if config_path else DEFAULT_MODELS_PATH
        self.registry = registry if registry is not None else ModelRegistry()
        self.selector = ModelSelector(self.registry)
        self.executor = TaskExecutor(client, timeout)
        self.logger = ExecutionLogger(log_level)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.database = database
        self._initialized = False
        self._init_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, client: ChatClient | None = None) -> Agent:
        """Build an agent wired to the Ollama backend and run history."""
        if client is None:
            from swe_router.clients.ollama import OllamaClient

            client = OllamaClient(settings.ollama_base_url, settings.ollama_api_key)

        database = Database(settings.data_dir)
        database.ensure_tables()
        return cls(
            client,
            config_path=settings.config_path,
            log_level=settings.log_level,
            timeout=settings.timeout,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            database=database,
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """
        Load profiles (unless the registry is pre-populated) and verify availability.

        Availability comes from the backend's model list. When the backend
        cannot list models, every configured model is assumed available.

        Raises:
            ConfigurationError: profiles could not be loaded
        """
        with self._init_lock:
            if not self._initialized:
                self._initialize()

    def _initialize(self) -> None:
        self.logger.info("Initializing router", {"config_path": str(self.config_path)})
        try:
            if len(self.registry) == 0:
                self.registry.load_profiles(self.config_path)
                self.logger.info("Model profiles loaded", {"count": len(self.registry)})

            list_models = getattr(self.client, "list_models", None)
            served = list_models() if callable(list_models) else []
            if served:
                self.registry.verify_availability(served)
            else:
                self.logger.warn("Backend model list unavailable; assuming all models available")
                self.registry.verify_availability(p.name for p in self.registry.get_all_profiles())
        except SweRouterError as e:
            self.logger.error("Failed to initialize router", {"error": str(e)})
            raise

        self._initialized = True
        self.logger.info("Router initialized", self.registry.get_stats())

    def execute_task(self, task: TaskInput | str) -> FormattedResult:
        """Run the full pipeline for one task."""
        if isinstance(task, str):
            task = TaskInput(description=task)

        self.initialize()
        # Fresh log per task; concurrent callers never share one
        log = ExecutionLogger(self.logger.level)
        log.info(
            "Starting task execution",
            {"task": task.description, "task_type": task.task_type or "auto-detect"},
        )

        run_id = f"run-{uuid.uuid4().hex[:8]}"
        parsed: TaskDescriptor | None = None
        score: float | None = None

        try:
            # 1. Parse task
            log.debug("Parsing task")
            parsed = parse_task(task)
            log.info(
                "Task parsed",
                {
                    "domain": str(parsed.domain),
                    "complexity": str(parsed.complexity),
                    "task_type": str(parsed.task_type),
                    "capabilities": list(parsed.required_capabilities),
                },
            )

            # 2. Select model
            log.debug("Selecting model")
            selection = self.selector.select_model(parsed)
            score = selection.score.score
            log.info(
                "Model selected",
                {
                    "model": selection.selected_model,
                    "score": score,
                    "alternatives": [a.model_name for a in selection.alternatives],
                },
            )

            # 3. Generate system prompt
            log.debug("Generating system prompt")
            system_prompt = generate_system_prompt(
                parsed.task_type, selection.selected_model, parsed.domain, task.context
            )

            # 4. Execute with fallback
            request = ExecutionRequest(
                task=parsed,
                model_name=selection.selected_model,
                system_prompt=system_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            fallback_models = [alt.model_name for alt in selection.alternatives]
            log.debug(
                "Executing task",
                {"model": selection.selected_model, "fallbacks": fallback_models},
            )
            outcome = self.executor.execute_with_fallback(request, fallback_models)

            # 5. Format
            if isinstance(outcome, list):
                log.error(
                    "All models failed",
                    {"attempted_models": [e.model_attempted for e in outcome]},
                )
                message = "All models failed: " + "; ".join(
                    f"{e.model_attempted}: {e.error}" for e in outcome
                )
                result = format_error(parsed, message, log.get_logs())
            else:
                log.info(
                    "Task execution completed",
                    {
                        "model_used": outcome.model_used,
                        "execution_time": outcome.execution_time,
                        "confidence": outcome.confidence,
                    },
                )
                result = format_result(parsed, selection, outcome, log.get_logs())

        except Exception as e:
            log.error("Task execution failed", {"error": str(e), "type": type(e).__name__})
            result = format_error(parsed or placeholder_task(task), str(e), log.get_logs())

        self.logger = log
        self._record(run_id, result, score)
        return result

    def _record(self, run_id: str, result: FormattedResult, score: float | None) -> None:
        if self.database is None:
            return
        self.database.record_run(run_id, result, score)

    def get_logs(self) -> str:
        """Step events of the last task as JSON."""
        return self.logger.export_logs()
