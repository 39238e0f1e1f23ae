"""Exception types shared by the core, the session and the CLI.

Every error carries a stable ``code`` so the session can report it to the
renderer without type checks.
"""

from __future__ import annotations

from pathlib import Path


class GliEditorError(Exception):
    """Base class for all gli-editor errors."""

    code = "error"


class FileError(GliEditorError):
    """Raised when the ignore file cannot be read."""

    code = "file_error"

    def __init__(self, path: str | Path, detail: str = "") -> None:
        self.path = str(path)
        self.detail = detail
        super().__init__(self._describe())

    def _describe(self) -> str:
        return f"File error: {self.path}"


class NotFoundError(FileError):
    code = "not_found"

    def _describe(self) -> str:
        return (
            f"File not found: {self.path}\n\n"
            f"Suggestion: Create the file with:\n  touch {self.path}"
        )


class PermissionDeniedError(FileError):
    code = "permission_denied"

    def _describe(self) -> str:
        return (
            f"Permission denied: {self.path}\n\n"
            f"Suggestion: Check file permissions with:\n  ls -l {self.path}"
        )


class InvalidEncodingError(FileError):
    code = "invalid_encoding"

    def _describe(self) -> str:
        if self.detail:
            return f"File contains invalid UTF-8: {self.path} ({self.detail})"
        return f"File contains invalid UTF-8: {self.path}"


class IoFailureError(FileError):
    code = "io_failure"

    def _describe(self) -> str:
        return f"I/O error on {self.path}: {self.detail}"


class OutOfBoundsError(GliEditorError):
    """Raised when a line number falls outside the loaded file."""

    code = "out_of_bounds"

    def __init__(self, requested: int, total: int) -> None:
        self.requested = requested
        self.total = total
        if total == 0:
            message = f"Line {requested} is out of bounds (file is empty)"
        else:
            message = (
                f"Line {requested} is out of bounds (file has {total} lines)\n\n"
                f"Valid range: 1-{total}"
            )
        super().__init__(message)


class WriteFailureError(GliEditorError):
    """Raised when the new content could not be written over the original."""

    code = "write_failure"

    def __init__(self, path: str | Path, reason: str, backup_path: Path | None = None) -> None:
        self.path = str(path)
        self.reason = reason
        self.backup_path = backup_path
        if backup_path is not None:
            recovery = f"A backup exists at {backup_path}; the original file {self.path} is unmodified."
        else:
            recovery = f"No backup was taken; the original file {self.path} is unmodified."
        super().__init__(f"Unable to save changes: {reason}. {recovery}")


class ExternalModificationError(GliEditorError):
    """Raised when the file changed on disk after it was loaded."""

    code = "external_modification"

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"File was modified by another process: {self.path}")


class InvalidArgumentsError(GliEditorError):
    """Raised for malformed command-line input such as a bad line spec."""

    code = "invalid_arguments"


class ReadOnlyError(GliEditorError):
    """Raised when an edit or delete is attempted in read-only mode."""

    code = "read_only"


class InvalidContentError(GliEditorError):
    """Raised when edited text cannot be stored as a single line."""

    code = "invalid_content"


class InvalidTransitionError(GliEditorError):
    """Raised when an intent is not valid in the session's current mode."""

    code = "invalid_transition"
