"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from swe_router.types import ConfigurationError, LogLevel

DEFAULT_MODELS_PATH = Path(__file__).parent / "models.yaml"
DEFAULT_DATA_DIR = Path.home() / ".swe_router"


@dataclass(frozen=True)
class Settings:
    """Router settings. Timeouts are in milliseconds."""

    ollama_base_url: str = "http://localhost:11434"
    ollama_api_key: str = ""
    config_path: Path = DEFAULT_MODELS_PATH
    log_level: LogLevel = LogLevel.INFO
    timeout: int = 60_000
    temperature: float = 0.7
    max_tokens: int | None = None
    data_dir: Path = DEFAULT_DATA_DIR

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from the environment.

        Raises:
            ConfigurationError: a variable is present but not parseable
        """
        env = os.environ if environ is None else environ

        level = env.get("SWE_ROUTER_LOG_LEVEL", LogLevel.INFO.value).upper()
        if level == "WARNING":
            level = LogLevel.WARN.value
        try:
            log_level = LogLevel(level)
        except ValueError as e:
            raise ConfigurationError(f"Invalid SWE_ROUTER_LOG_LEVEL: {level}") from e

        try:
            timeout = int(env.get("SWE_ROUTER_TIMEOUT", "60000"))
        except ValueError as e:
            raise ConfigurationError("SWE_ROUTER_TIMEOUT must be an integer (ms)") from e
        if timeout <= 0:
            raise ConfigurationError("SWE_ROUTER_TIMEOUT must be positive")

        try:
            temperature = float(env.get("SWE_ROUTER_TEMPERATURE", "0.7"))
        except ValueError as e:
            raise ConfigurationError("SWE_ROUTER_TEMPERATURE must be a number") from e

        max_tokens: int | None = None
        if env.get("SWE_ROUTER_MAX_TOKENS"):
            try:
                max_tokens = int(env["SWE_ROUTER_MAX_TOKENS"])
            except ValueError as e:
                raise ConfigurationError("SWE_ROUTER_MAX_TOKENS must be an integer") from e
            if max_tokens <= 0:
                raise ConfigurationError("SWE_ROUTER_MAX_TOKENS must be positive")

        config_path = env.get("SWE_ROUTER_CONFIG_PATH")
        data_dir = env.get("SWE_ROUTER_DATA_DIR")

        return cls(
            ollama_base_url=env.get("OLLAMA_BASE_URL", "http://localhost:11434"),
            ollama_api_key=env.get("OLLAMA_API_KEY", ""),
            config_path=Path(config_path).expanduser() if config_path else DEFAULT_MODELS_PATH,
            log_level=log_level,
            timeout=timeout,
            temperature=temperature,
            max_tokens=max_tokens,
            data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
        )
