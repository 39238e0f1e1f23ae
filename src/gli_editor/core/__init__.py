from gli_editor.core.backup import BackupManager
from gli_editor.core.classifier import classify
from gli_editor.core.conflict import ConflictDetector
from gli_editor.core.file_io import load_file, save_file
from gli_editor.core.line_spec import LineSpec
from gli_editor.core.line_store import LineStore
from gli_editor.core.models import (
    Classification,
    EditKind,
    EditOperation,
    Fingerprint,
    LineEnding,
    LineKind,
    LineRecord,
    SessionMode,
    SessionView,
    ViewportState,
)
from gli_editor.core.session import ConflictChoice, EditSession

__all__ = [
    "BackupManager",
    "Classification",
    "ConflictChoice",
    "ConflictDetector",
    "EditKind",
    "EditOperation",
    "EditSession",
    "Fingerprint",
    "LineEnding",
    "LineKind",
    "LineRecord",
    "LineSpec",
    "LineStore",
    "SessionMode",
    "SessionView",
    "ViewportState",
    "classify",
    "load_file",
    "save_file",
]
