"""Modification-time snapshots for detecting external writers."""

from __future__ import annotations

import logging
from pathlib import Path

from gli_editor.errors import IoFailureError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Read-detect-act staleness check; the file is never locked."""

    def snapshot(self, path: Path) -> int:
        """Return the file's current mtime in nanoseconds."""
        try:
            return path.stat().st_mtime_ns
        except FileNotFoundError:
            raise NotFoundError(path)
        except PermissionError:
            raise PermissionDeniedError(path)
        except OSError as e:
            raise IoFailureError(path, str(e))

    def has_changed(self, path: Path, baseline: int) -> bool:
        """True if the file's mtime moved past ``baseline`` or the file is gone."""
        try:
            current = path.stat().st_mtime_ns
        except FileNotFoundError:
            logger.warning(f"{path} disappeared since it was loaded")
            return True
        except PermissionError:
            raise PermissionDeniedError(path)
        except OSError as e:
            raise IoFailureError(path, str(e))
        changed = current > baseline
        if changed:
            logger.warning(f"{path} was modified externally (mtime {current} > {baseline})")
        return changed
