"""Write session results back to disk with backup support."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from remedy.core.config import get_remedy_dir
from remedy.core.models import SessionResult

logger = logging.getLogger(__name__)


def read_source(file_path: Path) -> str:
    """Read a source file the way fix sessions see it."""
    return file_path.read_text(errors="ignore")


@dataclass
class WriteResult:
    """Outcome of writing (or restoring) one file."""

    success: bool
    message: str
    file: Path | None = None
    session_id: str = ""
    backup: Path | None = None


class FixApplier:
    """Writes fixed text to source files, backing up the original first."""

    def __init__(self, project_path: Path, backup: bool = True):
        self.project_path = project_path
        self.backup = backup
        self.remedy_dir = get_remedy_dir(project_path)
        self.backup_dir = self.remedy_dir / "backups"

    def write(self, result: SessionResult) -> WriteResult:
        """Write ``result.fixed_text`` to the session's file."""
        session_id = result.session.id
        file_path = self._resolve_file(Path(result.session.file_path))

        if not result.changed:
            return WriteResult(
                success=False,
                message="No changes to write.",
                file=file_path,
                session_id=session_id,
            )

        if not file_path.exists():
            return WriteResult(
                success=False,
                message=f"File not found: {file_path}",
                file=file_path,
                session_id=session_id,
            )

        content = read_source(file_path)

        # Verify the file still holds what the session analysed
        if content != result.original_text:
            return WriteResult(
                success=False,
                message="Source file has changed since the fix session. Re-run `remedy fix` first.",
                file=file_path,
                session_id=session_id,
            )

        backup_file = None
        if self.backup:
            backup_file = self._create_backup(session_id, file_path)

        file_path.write_text(result.fixed_text)
        logger.info("Wrote %s (session %s)", file_path, session_id)

        return WriteResult(
            success=True,
            message=f"Applied {len(result.applied_fixes)} fixes to {file_path}",
            file=file_path,
            session_id=session_id,
            backup=backup_file,
        )

    def _resolve_file(self, file: Path) -> Path:
        """Resolve a possibly relative file path."""
        if file.is_absolute():
            return file
        return self.project_path / file

    def _create_backup(self, session_id: str, file_path: Path) -> Path:
        """Create a backup of the file before modifying it."""
        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
        backup_session = self.backup_dir / timestamp
        backup_session.mkdir(parents=True, exist_ok=True)

        # Save the original file
        backup_file = backup_session / f"{file_path.name}.bak"
        counter = 1
        while backup_file.exists():
            backup_file = backup_session / f"{file_path.name}.{counter}.bak"
            counter += 1
        shutil.copy2(file_path, backup_file)

        # Update manifest
        manifest_file = backup_session / "manifest.json"
        manifest = []
        if manifest_file.exists():
            manifest = json.loads(manifest_file.read_text())

        manifest.append({
            "session_id": session_id,
            "file": str(file_path),
            "backup": str(backup_file),
            "timestamp": timestamp,
        })
        manifest_file.write_text(json.dumps(manifest, indent=2))
        return backup_file
