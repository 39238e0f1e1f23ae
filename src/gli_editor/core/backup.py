"""Timestamped sibling backups of the ignore file."""

from __future__ import annotations

import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MAX_BACKUPS = 5
BACKUP_MARKER = ".backup."


def backup_prefix(path: Path) -> str:
    return f"{path.name}{BACKUP_MARKER}"


@dataclass
class BackupManager:
    max_backups: int = DEFAULT_MAX_BACKUPS

    def create_backup(self, path: Path) -> Path | None:
        """Copy ``path`` to ``{path}.backup.{unix_timestamp}``.

        Returns None when there is nothing on disk to back up. OSError
        propagates; callers must not overwrite the original without a backup.
        """
        if not path.exists():
            return None

        timestamp = int(time.time())
        backup_path = path.with_name(f"{backup_prefix(path)}{timestamp}")
        suffix = 1
        while backup_path.exists():
            backup_path = path.with_name(f"{backup_prefix(path)}{timestamp}-{suffix}")
            suffix += 1

        shutil.copy(path, backup_path)
        logger.info(f"Created backup {backup_path}")
        return backup_path

    def list_backups(self, path: Path) -> list[Path]:
        """Return existing backups of ``path``, oldest first."""
        parent = path.parent
        if not parent.is_dir():
            return []
        prefix = backup_prefix(path)
        found: list[tuple[float, str, Path]] = []
        for entry in parent.iterdir():
            if not entry.name.startswith(prefix) or not entry.is_file():
                continue
            try:
                mtime = entry.stat().st_mtime
            except OSError:
                continue
            found.append((mtime, entry.name, entry))
        found.sort()
        return [entry for _, _, entry in found]

    def prune(self, path: Path, keep_count: int | None = None) -> tuple[list[Path], list[str]]:
        """Delete all but the newest ``keep_count`` backups (never fewer than one).

        Best effort: failures are logged and returned as warnings, never raised.
        """
        keep = self.max_backups if keep_count is None else keep_count
        keep = max(keep, 1)
        warnings: list[str] = []
        try:
            backups = self.list_backups(path)
        except OSError as e:
            logger.warning(f"Failed to list backups for {path}: {e}")
            return [], [f"could not list backups: {e}"]

        excess = backups[: max(0, len(backups) - keep)]
        removed: list[Path] = []
        for backup in excess:
            try:
                backup.unlink()
                removed.append(backup)
            except OSError as e:
                logger.warning(f"Failed to remove old backup {backup}: {e}")
                warnings.append(f"could not remove {backup.name}: {e}")
        if removed:
            logger.debug(f"Pruned {len(removed)} old backup(s) of {path}")
        return removed, warnings
