"""Undo/rollback support for written fix sessions."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from remedy.core.config import get_remedy_dir
from remedy.fix.applier import WriteResult

logger = logging.getLogger(__name__)


@dataclass
class UndoEntry:
    """A session whose write can be reverted."""

    session_id: str
    file: Path
    backup: Path
    timestamp: str


class UndoManager:
    """Restores files from the backups taken by FixApplier."""

    def __init__(self, project_path: Path):
        self.project_path = project_path
        self.remedy_dir = get_remedy_dir(project_path)
        self.backup_dir = self.remedy_dir / "backups"

    def list_undoable(self) -> list[UndoEntry]:
        """List all sessions that can be undone, newest batch first."""
        entries: list[UndoEntry] = []
        if not self.backup_dir.exists():
            return entries

        for batch_dir in sorted(self.backup_dir.iterdir(), reverse=True):
            entries.extend(self._read_manifest(batch_dir))

        return entries

    def undo(self, session_id: str) -> WriteResult:
        """Undo one session by restoring its backup."""
        for entry in self.list_undoable():
            if entry.session_id == session_id:
                return self._restore(entry)

        return WriteResult(
            success=False,
            message=f"No undo history for {session_id}",
            session_id=session_id,
        )

    def undo_last_session(self) -> list[WriteResult]:
        """Undo every session written in the most recent backup batch."""
        if not self.backup_dir.exists():
            return []

        batches = sorted(self.backup_dir.iterdir(), reverse=True)
        if not batches:
            return []

        # Newest write first, so a file touched twice ends at its oldest backup
        return [self._restore(e) for e in reversed(self._read_manifest(batches[0]))]

    def _read_manifest(self, batch_dir: Path) -> list[UndoEntry]:
        manifest_file = batch_dir / "manifest.json"
        if not manifest_file.exists():
            return []
        return [
            UndoEntry(
                session_id=entry["session_id"],
                file=Path(entry["file"]),
                backup=Path(entry["backup"]),
                timestamp=entry["timestamp"],
            )
            for entry in json.loads(manifest_file.read_text())
        ]

    def _restore(self, entry: UndoEntry) -> WriteResult:
        if not entry.backup.exists():
            return WriteResult(
                success=False,
                message=f"Backup file not found for {entry.session_id}",
                file=entry.file,
                session_id=entry.session_id,
            )

        target_file = entry.file
        if not target_file.is_absolute():
            target_file = self.project_path / target_file

        shutil.copy2(entry.backup, target_file)
        logger.info("Restored %s from %s", target_file, entry.backup)

        return WriteResult(
            success=True,
            message=f"Reverted {entry.session_id}: restored {entry.file}",
            file=entry.file,
            session_id=entry.session_id,
            backup=entry.backup,
        )
