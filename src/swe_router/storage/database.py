"""SQLite run history with WAL mode."""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from swe_router.types import FormattedResult


class Database:
    """SQLite storage layer with WAL mode for the router."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir = data_dir or Path.home() / ".swe_router"
        self.db_path = self.data_dir / "data" / "swe_router.db"

    def _ensure_dirs(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        (self.data_dir / "data").mkdir(exist_ok=True)

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with WAL mode."""
        self._ensure_dirs()
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def ensure_tables(self) -> None:
        """Create all tables if they don't exist."""
        with self.connect() as conn:
            conn.executescript(_SCHEMA)

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        """Execute a query and return results."""
        with self.connect() as conn:
            cursor = conn.execute(sql, params)
            return cursor.fetchall()

    def execute_insert(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        """Execute an insert and return lastrowid."""
        with self.connect() as conn:
            cursor = conn.execute(sql, params)
            return cursor.lastrowid or 0

    def record_run(self, run_id: str, result: FormattedResult, score: float | None = None) -> int:
        """Store the outcome of one pipeline run."""
        task = result.task
        execution = result.execution
        return self.execute_insert(
            """
            INSERT INTO runs (
                run_id, description, task_type, domain, complexity,
                selected_model, model_used, score, success,
                execution_time, tokens_used, confidence, error
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                run_id,
                task.description[:200],
                str(task.task_type),
                str(task.domain),
                str(task.complexity),
                result.selection["selected_model"],
                execution["model_used"],
                score,
                int(result.success),
                execution["execution_time"],
                execution["tokens_used"],
                execution["confidence"],
                result.result["metadata"].get("error"),
            ),
        )

    def recent_runs(self, limit: int = 20) -> list[sqlite3.Row]:
        return self.execute("SELECT * FROM runs ORDER BY id DESC LIMIT ?", (limit,))


_SCHEMA = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS runs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    run_id TEXT UNIQUE NOT NULL,
    description TEXT NOT NULL,
    task_type TEXT NOT NULL,
    domain TEXT NOT NULL,
    complexity TEXT NOT NULL,
    selected_model TEXT NOT NULL,
    model_used TEXT NOT NULL,
    score REAL,
    success INTEGER NOT NULL DEFAULT 0,
    execution_time INTEGER NOT NULL DEFAULT 0,
    tokens_used INTEGER NOT NULL DEFAULT 0,
    confidence INTEGER NOT NULL DEFAULT 0,
    error TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

INSERT OR IGNORE INTO schema_version (version) VALUES (1);
"""
