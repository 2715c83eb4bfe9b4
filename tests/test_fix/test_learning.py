"""Tests for LearningStore: outcomes, convergence, persistence and reset."""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

import pytest

from remedy.fix.learning import LEARNING_DB_NAME, LearningStore


@pytest.fixture
def store() -> LearningStore:
    return LearningStore()


class TestRecordOutcome:
    def test_first_outcome_starts_from_base(self, store: LearningStore):
        entry = store.record_outcome("s", "r", True, base_confidence=0.8)

        assert entry.attempts == 1
        assert entry.successes == 1
        assert entry.confidence == pytest.approx(0.9)

    def test_failure_halves_confidence(self, store: LearningStore):
        entry = store.record_outcome("s", "r", False, base_confidence=0.9)

        assert entry.attempts == 1
        assert entry.successes == 0
        assert entry.confidence == pytest.approx(0.45)

    def test_base_only_used_on_creation(self, store: LearningStore):
        store.record_outcome("s", "r", False, base_confidence=0.8)
        entry = store.record_outcome("s", "r", False, base_confidence=0.1)

        assert entry.confidence == pytest.approx(0.2)

    def test_converges_towards_one(self, store: LearningStore):
        for _ in range(30):
            entry = store.record_outcome("s", "r", True, base_confidence=0.1)

        assert entry.confidence == pytest.approx(1.0, abs=1e-6)
        assert entry.success_rate == 1.0

    def test_converges_towards_zero(self, store: LearningStore):
        for _ in range(30):
            entry = store.record_outcome("s", "r", False, base_confidence=0.9)

        assert entry.confidence == pytest.approx(0.0, abs=1e-6)
        assert entry.successes == 0

    def test_keys_are_per_strategy_and_rule(self, store: LearningStore):
        store.record_outcome("s", "r1", True, base_confidence=0.5)
        store.record_outcome("s", "r2", False, base_confidence=0.5)

        assert store.snapshot() == {("s", "r1"): 0.75, ("s", "r2"): 0.25}

    def test_returned_entry_is_a_copy(self, store: LearningStore):
        entry = store.record_outcome("s", "r", True, base_confidence=0.5)
        entry.confidence = 0.0

        assert store.get("s", "r").confidence == pytest.approx(0.75)

    def test_concurrent_updates_are_all_counted(self, store: LearningStore):
        def _work():
            for _ in range(50):
                store.record_outcome("s", "r", True, base_confidence=0.5)

        threads = [threading.Thread(target=_work) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.get("s", "r").attempts == 200


class TestReads:
    def test_get_missing(self, store: LearningStore):
        assert store.get("s", "r") is None

    def test_entries_sorted(self, store: LearningStore):
        store.record_outcome("b", "r", True, base_confidence=0.5)
        store.record_outcome("a", "r", True, base_confidence=0.5)

        assert [e.strategy_id for e in store.entries()] == ["a", "b"]
        assert len(store) == 2

    def test_snapshot_is_frozen(self, store: LearningStore):
        store.record_outcome("s", "r", True, base_confidence=0.5)
        snapshot = store.snapshot()
        store.record_outcome("s", "r", False, base_confidence=0.5)

        assert snapshot[("s", "r")] == pytest.approx(0.75)

    def test_reset(self, store: LearningStore):
        store.record_outcome("s", "r", True, base_confidence=0.5)

        assert store.reset() == 1
        assert len(store) == 0
        assert store.snapshot() == {}


class TestPersistence:
    def test_in_memory_by_default(self, store: LearningStore):
        assert store.persistent is False

    def test_survives_reopen(self, tmp_path: Path):
        db_path = tmp_path / "learning.db"
        first = LearningStore(db_path)
        first.record_outcome("s", "r", True, base_confidence=0.6)
        first.record_outcome("s", "r", False, base_confidence=0.6)

        second = LearningStore(db_path)
        entry = second.get("s", "r")

        assert second.persistent is True
        assert entry.attempts == 2
        assert entry.successes == 1
        assert entry.confidence == pytest.approx(0.4)

    def test_rows_written_through(self, tmp_path: Path):
        db_path = tmp_path / "learning.db"
        LearningStore(db_path).record_outcome("s", "r", True, base_confidence=0.5)

        conn = sqlite3.connect(str(db_path))
        rows = conn.execute("SELECT strategy_id, rule_id, attempts FROM learning").fetchall()
        conn.close()

        assert rows == [("s", "r", 1)]

    def test_reset_clears_database(self, tmp_path: Path):
        db_path = tmp_path / "learning.db"
        store = LearningStore(db_path)
        store.record_outcome("s", "r", True, base_confidence=0.5)
        store.reset()

        assert len(LearningStore(db_path)) == 0

    def test_for_project_uses_remedy_dir(self, tmp_path: Path):
        store = LearningStore.for_project(tmp_path)
        store.record_outcome("s", "r", True, base_confidence=0.5)

        assert (tmp_path / ".remedy" / LEARNING_DB_NAME).exists()
