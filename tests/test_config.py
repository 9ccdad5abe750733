"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from swe_router.config import DEFAULT_DATA_DIR, DEFAULT_MODELS_PATH, Settings
from swe_router.types import ConfigurationError, LogLevel


def test_defaults() -> None:
    """Test settings from an empty environment."""
    settings = Settings.from_env({})
    assert settings.ollama_base_url == "http://localhost:11434"
    assert settings.ollama_api_key == ""
    assert settings.config_path == DEFAULT_MODELS_PATH
    assert settings.log_level == LogLevel.INFO
    assert settings.timeout == 60000
    assert settings.temperature == 0.7
    assert settings.max_tokens is None
    assert settings.data_dir == DEFAULT_DATA_DIR


def test_bundled_models_file_exists() -> None:
    """Test the bundled models file ships with the package."""
    assert DEFAULT_MODELS_PATH.is_file()


def test_overrides(tmp_path: Path) -> None:
    """Test every variable overrides its default."""
    settings = Settings.from_env(
        {
            "OLLAMA_BASE_URL": "http://gpu-box:11434",
            "OLLAMA_API_KEY": "secret",
            "SWE_ROUTER_CONFIG_PATH": str(tmp_path / "models.yaml"),
            "SWE_ROUTER_LOG_LEVEL": "debug",
            "SWE_ROUTER_TIMEOUT": "1500",
            "SWE_ROUTER_TEMPERATURE": "0.2",
            "SWE_ROUTER_MAX_TOKENS": "2048",
            "SWE_ROUTER_DATA_DIR": str(tmp_path),
        }
    )
    assert settings.ollama_base_url == "http://gpu-box:11434"
    assert settings.ollama_api_key == "secret"
    assert settings.config_path == tmp_path / "models.yaml"
    assert settings.log_level == LogLevel.DEBUG
    assert settings.timeout == 1500
    assert settings.temperature == 0.2
    assert settings.max_tokens == 2048
    assert settings.data_dir == tmp_path


def test_zero_temperature() -> None:
    """Test a zero temperature is kept."""
    assert Settings.from_env({"SWE_ROUTER_TEMPERATURE": "0"}).temperature == 0.0


def test_warning_alias() -> None:
    """Test WARNING is accepted as an alias for WARN."""
    assert Settings.from_env({"SWE_ROUTER_LOG_LEVEL": "WARNING"}).log_level == LogLevel.WARN


@pytest.mark.parametrize(
    "env",
    [
        {"SWE_ROUTER_LOG_LEVEL": "chatty"},
        {"SWE_ROUTER_TIMEOUT": "soon"},
        {"SWE_ROUTER_TIMEOUT": "0"},
        {"SWE_ROUTER_TEMPERATURE": "warm"},
        {"SWE_ROUTER_MAX_TOKENS": "lots"},
        {"SWE_ROUTER_MAX_TOKENS": "-5"},
    ],
)
def test_invalid_values(env: dict[str, str]) -> None:
    """Test unparseable values are configuration errors."""
    with pytest.raises(ConfigurationError):
        Settings.from_env(env)


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the process environment is used when none is passed."""
    monkeypatch.setenv("SWE_ROUTER_TIMEOUT", "2500")
    assert Settings.from_env().timeout == 2500
