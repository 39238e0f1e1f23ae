"""Loading the ignore file into a LineStore and saving it back atomically."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from gli_editor.core.backup import BackupManager
from gli_editor.core.line_store import LineStore
from gli_editor.core.models import LineEnding, SaveResult
from gli_editor.errors import (
    InvalidEncodingError,
    IoFailureError,
    NotFoundError,
    PermissionDeniedError,
    WriteFailureError,
)

logger = logging.getLogger(__name__)


def detect_line_ending(text: str, default: LineEnding = LineEnding.LF) -> LineEnding:
    """CRLF wins over LF, LF over CR; ``default`` when there is no terminator."""
    if "\r\n" in text:
        return LineEnding.CRLF
    if "\n" in text:
        return LineEnding.LF
    if "\r" in text:
        return LineEnding.CR
    return default


def split_lines(text: str, ending: LineEnding) -> tuple[list[str], bool]:
    """Split on ``ending``; returns the lines and whether a final terminator was present."""
    if not text:
        return [], False
    terminator = ending.terminator
    lines = text.split(terminator)
    if lines[-1] == "":
        lines.pop()
        return lines, True
    return lines, False


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        raise NotFoundError(path)
    except IsADirectoryError:
        raise IoFailureError(path, "is a directory")
    except PermissionError:
        raise PermissionDeniedError(path)
    except OSError as e:
        raise IoFailureError(path, str(e))


def load_file(
    path: Path,
    *,
    default_ending: LineEnding = LineEnding.LF,
    preserve_missing_final_newline: bool = False,
) -> LineStore:
    """Read and classify ``path``.

    Raises NotFoundError, PermissionDeniedError, InvalidEncodingError or
    IoFailureError.
    """
    data = _read_bytes(path)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncodingError(path, f"byte {e.start}")

    ending = detect_line_ending(text, default_ending)
    lines, had_final = split_lines(text, ending)

    for number, line in enumerate(lines, 1):
        if "\x00" in line:
            raise InvalidEncodingError(path, f"null byte on line {number}")

    final_terminator = had_final or not preserve_missing_final_newline
    store = LineStore.load_from_lines(lines, ending, path, final_terminator=final_terminator)
    logger.info(f"Loaded {path}: {store.total_lines} lines, {ending} line endings")
    return store


def _atomic_write(path: Path, content: str) -> None:
    """Write content to path atomically using tempfile + os.replace."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(content.encode("utf-8"))
            fh.flush()
            os.fsync(fh.fileno())
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise


def save_file(
    store: LineStore,
    path: Path | None = None,
    *,
    backup_manager: BackupManager | None = None,
) -> SaveResult:
    """Back up the on-disk file, then replace it with ``store``'s content.

    A failure at any step raises WriteFailureError and leaves the original
    untouched. Pruning old backups happens after the replace and never fails
    the save.
    """
    target = path or store.path
    if target is None:
        raise WriteFailureError("<unnamed>", "store has no path")
    backups = backup_manager or BackupManager()
    # write through a symlink to the file it points at
    real = target.resolve()

    try:
        backup_path = backups.create_backup(real)
    except OSError as e:
        logger.error(f"Backup of {target} failed: {e}")
        raise WriteFailureError(target, f"could not create backup ({e})")

    try:
        _atomic_write(real, store.serialize())
    except OSError as e:
        logger.error(f"Write to {target} failed: {e}")
        raise WriteFailureError(target, str(e.strerror or e), backup_path)

    pruned, warnings = backups.prune(real)
    logger.info(f"Saved {target} ({store.total_lines} lines)")
    return SaveResult(
        path=target,
        backup_path=backup_path,
        pruned=pruned,
        prune_warnings=warnings,
    )
