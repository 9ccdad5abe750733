"""Model Registry - Holds validated model profiles and their availability."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from swe_router.types import (
    Complexity,
    ConfigurationError,
    Domain,
    ModelProfile,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "provider",
    "domains",
    "maxComplexity",
    "capabilities",
    "contextWindow",
    "estimatedLatency",
    "costPerToken",
    "strengths",
    "weaknesses",
)


def _is_number(value: Any) -> bool:
    # bool is an int subclass; YAML "true" must not pass as a number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _string_list(data: Mapping[str, Any], key: str, non_empty: bool) -> list[str]:
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"{key} must be a list of strings")
    if non_empty and not value:
        raise ConfigurationError(f"{key} must be a non-empty list")
    return value


def validate_profile(name: str, data: Any) -> ModelProfile:
    """Validate one raw configuration entry and build a profile.

    Raises:
        ConfigurationError: naming the first field that failed.
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError("profile entry must be a mapping")

    for field_name in REQUIRED_FIELDS:
        if field_name not in data:
            raise ConfigurationError(f"Missing required field: {field_name}")

    if not isinstance(data["provider"], str):
        raise ConfigurationError("provider must be a string")

    raw_domains = _string_list(data, "domains", non_empty=True)
    try:
        domains = tuple(dict.fromkeys(Domain(d) for d in raw_domains))
    except ValueError as e:
        raise ConfigurationError(f"Invalid domain in {raw_domains}") from e

    capabilities = tuple(dict.fromkeys(_string_list(data, "capabilities", non_empty=True)))

    context_window = data["contextWindow"]
    if not _is_number(context_window) or context_window <= 0:
        raise ConfigurationError("contextWindow must be a positive number")
    latency = data["estimatedLatency"]
    if not _is_number(latency) or latency < 0:
        raise ConfigurationError("estimatedLatency must be a non-negative number")
    cost = data["costPerToken"]
    if not _is_number(cost) or cost < 0:
        raise ConfigurationError("costPerToken must be a non-negative number")

    try:
        max_complexity = Complexity(data["maxComplexity"])
    except ValueError as e:
        raise ConfigurationError(f"Invalid maxComplexity: {data['maxComplexity']}") from e

    return ModelProfile(
        name=name,
        provider=data["provider"],
        domains=domains,
        max_complexity=max_complexity,
        capabilities=capabilities,
        context_window=int(context_window),
        estimated_latency=float(latency),
        cost_per_token=float(cost),
        strengths=list(_string_list(data, "strengths", non_empty=False)),
        weaknesses=list(_string_list(data, "weaknesses", non_empty=False)),
        available=False,
    )


class ModelRegistry:
    """
    Owns the table of model profiles for one router instance.

    Features:
    - YAML or JSON configuration, validated per entry
    - Invalid entries are skipped with a warning, never stored
    - Availability flags updated by an explicit verification call
    - Reads and mutations serialized by a lock; readers get snapshot copies
    """

    def __init__(self) -> None:
        self._profiles: dict[str, ModelProfile] = {}
        self._lock = threading.RLock()

    def load_profiles(self, source: Path | str) -> None:
        """
        Load model profiles from a YAML (or ``.json``) file.

        Raises:
            ConfigurationError: unreadable or malformed source, or zero valid profiles
        """
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration from {path}: {e}") from e

        try:
            if path.suffix.lower() == ".json":
                config = json.loads(text)
            else:
                config = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse configuration {path}: {e}") from e

        if not isinstance(config, Mapping) or not isinstance(config.get("models"), Mapping):
            raise ConfigurationError(
                'Invalid configuration format: missing or invalid "models" field'
            )

        self.load_mapping(config["models"])
        logger.info("Loaded %d model profiles from %s", len(self._profiles), path)

    def load_mapping(self, models: Mapping[str, Any]) -> None:
        """
        Replace the registry contents with profiles built from ``models``.

        The previous table is kept if the new one would be empty.
        """
        loaded: dict[str, ModelProfile] = {}
        for name, data in models.items():
            try:
                loaded[str(name)] = validate_profile(str(name), data)
            except ConfigurationError as e:
                logger.warning('Skipping invalid model profile "%s": %s', name, e)

        if not loaded:
            raise ConfigurationError("No valid model profiles found in configuration")

        with self._lock:
            self._profiles = loaded

    def verify_availability(self, known_available: Iterable[str]) -> None:
        """Set every profile's availability by membership in ``known_available``."""
        names = set(known_available)
        with self._lock:
            for name, profile in self._profiles.items():
                profile.available = name in names
            available = sum(1 for p in self._profiles.values() if p.available)
            total = len(self._profiles)
        logger.info("%d/%d models available", available, total)

    def get_profile(self, name: str) -> ModelProfile | None:
        """Get a profile by name."""
        with self._lock:
            profile = self._profiles.get(name)
            return replace(profile) if profile else None

    def get_all_profiles(self) -> list[ModelProfile]:
        """Get all profiles in configuration order."""
        with self._lock:
            return [replace(p) for p in self._profiles.values()]

    def get_available_profiles(self) -> list[ModelProfile]:
        """Get only profiles currently marked available."""
        with self._lock:
            return [replace(p) for p in self._profiles.values() if p.available]

    def __len__(self) -> int:
        with self._lock:
            return len(self._profiles)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._profiles

    def get_stats(self) -> dict[str, Any]:
        """Get registry statistics."""
        with self._lock:
            profiles = list(self._profiles.values())

        by_provider: dict[str, int] = {}
        for profile in profiles:
            by_provider[profile.provider] = by_provider.get(profile.provider, 0) + 1

        return {
            "total": len(profiles),
            "available": sum(1 for p in profiles if p.available),
            "by_provider": by_provider,
        }
