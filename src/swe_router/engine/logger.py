"""Execution Logger - Ordered structured step events for one request."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from swe_router.types import LogEntry, LogLevel

logger = logging.getLogger(__name__)

LEVEL_ORDER = tuple(LogLevel)

# Mirror of each level onto the stdlib logging scale
STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class ExecutionLogger:
    """
    Collects step events as an ordered list of LogEntry records.

    Entries below the configured level are dropped. Every kept entry is also
    forwarded to the ``swe_router`` stdlib logger, leaving the sink to the host.
    """

    def __init__(self, level: LogLevel | str = LogLevel.INFO) -> None:
        self._level = LogLevel(level)
        self._entries: list[LogEntry] = []

    @property
    def level(self) -> LogLevel:
        return self._level

    def set_log_level(self, level: LogLevel | str) -> None:
        self._level = LogLevel(level)

    def should_log(self, level: LogLevel) -> bool:
        return LEVEL_ORDER.index(level) >= LEVEL_ORDER.index(self._level)

    def log(self, level: LogLevel | str, step: str, details: dict[str, Any] | None = None) -> None:
        level = LogLevel(level)
        if not self.should_log(level):
            return

        entry = LogEntry(
            timestamp=int(time.time() * 1000),
            level=level,
            step=step,
            details=dict(details or {}),
        )
        self._entries.append(entry)

        if entry.details:
            logger.log(STDLIB_LEVELS[level], "%s %s", step, entry.details)
        else:
            logger.log(STDLIB_LEVELS[level], "%s", step)

    def debug(self, step: str, details: dict[str, Any] | None = None) -> None:
        self.log(LogLevel.DEBUG, step, details)

    def info(self, step: str, details: dict[str, Any] | None = None) -> None:
        self.log(LogLevel.INFO, step, details)

    def warn(self, step: str, details: dict[str, Any] | None = None) -> None:
        self.log(LogLevel.WARN, step, details)

    def error(self, step: str, details: dict[str, Any] | None = None) -> None:
        self.log(LogLevel.ERROR, step, details)

    def get_logs(self) -> list[LogEntry]:
        """Copy of all entries in arrival order."""
        return list(self._entries)

    def get_logs_by_level(self, level: LogLevel | str) -> list[LogEntry]:
        level = LogLevel(level)
        return [entry for entry in self._entries if entry.level == level]

    def clear(self) -> None:
        self._entries = []

    def export_logs(self) -> str:
        """All entries as a JSON array."""
        return json.dumps([entry.to_dict() for entry in self._entries], indent=2, default=str)
