"""Outcome statistics per (strategy, rule) pair.

Every fix attempt is recorded here.  The blended confidence feeds the strategy
selector of *later* sessions: a session takes a :meth:`LearningStore.snapshot`
before planning and never sees updates made while it runs.

The store is in-memory by default.  Given a database path it loads existing
entries at construction and writes each update through to SQLite
(``{project_root}/.remedy/learning.db`` from the CLI).  Entries are never
pruned.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path

from remedy.core.config import get_remedy_dir
from remedy.core.models import LearningEntry

logger = logging.getLogger(__name__)

LEARNING_DB_NAME = "learning.db"

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS learning (
    strategy_id TEXT NOT NULL,
    rule_id     TEXT NOT NULL,
    attempts    INTEGER NOT NULL DEFAULT 0,
    successes   INTEGER NOT NULL DEFAULT 0,
    confidence  REAL NOT NULL,
    updated_at  TEXT NOT NULL,
    PRIMARY KEY (strategy_id, rule_id)
);
"""

LearningKey = tuple[str, str]


class LearningStore:
    """Thread-safe (strategy, rule) -> outcome statistics.

    Usage::

        store = LearningStore()                       # in-memory
        store = LearningStore.for_project(Path("."))  # persisted
        store.record_outcome("replace_console_log", "console_log_in_production",
                             True, base_confidence=0.95)
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self._entries: dict[LearningKey, LearningEntry] = {}
        self._db_path = db_path
        self._lock = threading.Lock()
        if self._db_path is not None:
            self._init_db()
            self._load()

    @classmethod
    def for_project(cls, project_path: Path | None = None) -> LearningStore:
        return cls(get_remedy_dir(project_path) / LEARNING_DB_NAME)

    @property
    def persistent(self) -> bool:
        return self._db_path is not None

    # ------------------------------------------------------------------
    # Database bootstrap
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=10)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.executescript(_SCHEMA_SQL)

    def _load(self) -> None:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT strategy_id, rule_id, attempts, successes, confidence, updated_at "
                "FROM learning"
            ).fetchall()
        for row in rows:
            key = (row["strategy_id"], row["rule_id"])
            self._entries[key] = LearningEntry(
                strategy_id=row["strategy_id"],
                rule_id=row["rule_id"],
                attempts=row["attempts"],
                successes=row["successes"],
                confidence=row["confidence"],
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
        logger.debug("Loaded %d learning entr(ies) from %s", len(rows), self._db_path)

    def _save(self, entry: LearningEntry) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO learning "
                "(strategy_id, rule_id, attempts, successes, confidence, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    entry.strategy_id,
                    entry.rule_id,
                    entry.attempts,
                    entry.successes,
                    entry.confidence,
                    entry.updated_at.isoformat(),
                ),
            )

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def record_outcome(
        self,
        strategy_id: str,
        rule_id: str,
        success: bool,
        base_confidence: float,
    ) -> LearningEntry:
        """Fold one fix attempt into the running statistics.

        The confidence moves halfway towards 1 on success and halfway towards
        0 on failure, so recent outcomes dominate.
        """
        key = (strategy_id, rule_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = LearningEntry(
                    strategy_id=strategy_id,
                    rule_id=rule_id,
                    confidence=base_confidence,
                )
                self._entries[key] = entry
            entry.attempts += 1
            if success:
                entry.successes += 1
            entry.confidence = (entry.confidence + (1.0 if success else 0.0)) / 2
            entry.updated_at = datetime.now()
            if self._db_path is not None:
                self._save(entry)
            updated = LearningEntry(**vars(entry))

        logger.debug(
            "Learning %s/%s: %d/%d successes, confidence %.3f",
            strategy_id, rule_id, updated.successes, updated.attempts, updated.confidence,
        )
        return updated

    def reset(self) -> int:
        """Forget every entry.  Returns the number removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            if self._db_path is not None:
                with self._connect() as conn:
                    conn.execute("DELETE FROM learning")
        return count

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, strategy_id: str, rule_id: str) -> LearningEntry | None:
        with self._lock:
            entry = self._entries.get((strategy_id, rule_id))
            return LearningEntry(**vars(entry)) if entry else None

    def entries(self) -> list[LearningEntry]:
        with self._lock:
            items = [LearningEntry(**vars(e)) for e in self._entries.values()]
        return sorted(items, key=lambda e: (e.strategy_id, e.rule_id))

    def snapshot(self) -> dict[LearningKey, float]:
        """Learned confidences, frozen for one planning pass."""
        with self._lock:
            return {key: entry.confidence for key, entry in self._entries.items()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
