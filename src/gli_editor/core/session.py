"""Edit session: viewport, cursor and the view/edit/delete/conflict state machine.

One session owns one loaded file. Every intent returns a fresh SessionView;
errors raised by the store, the file layer or the conflict check are caught
and reported on the view, and in-memory state is left as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gli_editor.core.backup import BackupManager
from gli_editor.core.conflict import ConflictDetector
from gli_editor.core.file_io import load_file, save_file
from gli_editor.core.line_store import LineStore
from gli_editor.core.models import (
    EditKind,
    EditOperation,
    LineEnding,
    LineKind,
    LineRecord,
    SaveResult,
    SessionMode,
    SessionView,
    ViewportState,
)
from gli_editor.errors import (
    ExternalModificationError,
    GliEditorError,
    InvalidContentError,
    InvalidTransitionError,
    ReadOnlyError,
)

if TYPE_CHECKING:
    from gli_editor.config import EditorConfig

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_HEIGHT = 20
DEFAULT_SCROLL_MARGIN = 3

_FORBIDDEN_IN_LINE = ("\n", "\r", "\x00")


class ConflictChoice(StrEnum):
    RELOAD = "reload"
    OVERWRITE = "overwrite"
    CANCEL = "cancel"


class EditSession:
    def __init__(
        self,
        path: Path,
        *,
        read_only: bool = False,
        viewport_height: int = DEFAULT_VIEWPORT_HEIGHT,
        scroll_margin: int = DEFAULT_SCROLL_MARGIN,
        default_ending: LineEnding = LineEnding.LF,
        preserve_missing_final_newline: bool = False,
        backup_manager: BackupManager | None = None,
        conflict_detector: ConflictDetector | None = None,
    ) -> None:
        self.path = path
        self.read_only = read_only
        self.scroll_margin = max(0, scroll_margin)
        self.default_ending = default_ending
        self.preserve_missing_final_newline = preserve_missing_final_newline
        self.backup_manager = backup_manager or BackupManager()
        self.detector = conflict_detector or ConflictDetector()

        # baseline predates the read
        self._baseline = self.detector.snapshot(path)
        self.store = self._load()

        self.mode = SessionMode.VIEWING
        self.pending: EditOperation | None = None
        self._conflict_return: SessionMode | None = None
        self.message: str | None = None
        self.last_error: GliEditorError | None = None
        self.last_save: SaveResult | None = None

        self.viewport = ViewportState(
            viewport_height=max(1, viewport_height),
            cursor_line=1 if self.store.total_lines else 0,
        )

    @classmethod
    def open(cls, path: Path, config: EditorConfig, *, read_only: bool = False) -> EditSession:
        return cls(
            path,
            read_only=read_only,
            scroll_margin=config.scroll_margin,
            default_ending=config.default_line_ending,
            preserve_missing_final_newline=config.preserve_missing_final_newline,
            backup_manager=BackupManager(max_backups=config.max_backups),
        )

    def _load(self) -> LineStore:
        return load_file(
            self.path,
            default_ending=self.default_ending,
            preserve_missing_final_newline=self.preserve_missing_final_newline,
        )

    # --- view -----------------------------------------------------------

    @property
    def total_lines(self) -> int:
        return self.store.total_lines

    @property
    def cursor_line(self) -> int:
        return self.viewport.cursor_line

    def visible_lines(self) -> list[LineRecord]:
        total = self.store.total_lines
        if total == 0:
            return []
        first = self.viewport.scroll_offset + 1
        last = min(self.viewport.scroll_offset + self.viewport.viewport_height, total)
        return self.store.range(first, last)

    def view(self) -> SessionView:
        return SessionView(
            path=self.path,
            mode=self.mode,
            viewport=self.viewport.model_copy(),
            total_lines=self.store.total_lines,
            visible=self.visible_lines(),
            pending=self.pending,
            message=self.message,
            error_code=self.last_error.code if self.last_error else None,
            error_message=str(self.last_error) if self.last_error else None,
            read_only=self.read_only,
        )

    def current_record(self) -> LineRecord | None:
        if self.viewport.cursor_line == 0:
            return None
        return self.store.get(self.viewport.cursor_line)

    def preview_target(self) -> tuple[str, int] | None:
        """``(file_path, source_line)`` of the fingerprint under the cursor."""
        record = self.current_record()
        if record is None or record.kind != LineKind.FINGERPRINT:
            return None
        fingerprint = record.classification.fingerprint
        if fingerprint is None:
            return None
        return fingerprint.file_path, fingerprint.source_line

    def clear_message(self) -> SessionView:
        return self._run(self._clear_message)

    def _clear_message(self) -> None:
        self.message = None

    def _noop(self) -> None:
        pass

    def _run(self, action: Callable[..., None], *args: Any, expires_delete: bool = True) -> SessionView:
        self.last_error = None
        if expires_delete and self.mode == SessionMode.CONFIRMING_DELETE:
            self._expire_delete()
        try:
            action(*args)
        except GliEditorError as e:
            logger.debug(f"{action.__name__} failed: {e.code}: {e}")
            self.last_error = e
        return self.view()

    # --- navigation -----------------------------------------------------

    def resize(self, viewport_height: int) -> SessionView:
        """Called by the renderer every frame; leaves mode, message and error alone."""
        self.viewport.viewport_height = max(1, viewport_height)
        self._follow_cursor()
        return self.view()

    def scroll(self, delta: int) -> SessionView:
        return self._run(self._scroll, delta)

    def page(self, pages: int) -> SessionView:
        return self._run(self._page, pages)

    def jump(self, line: int) -> SessionView:
        return self._run(self._jump, line)

    def jump_top(self) -> SessionView:
        return self._run(self._jump_edge, False)

    def jump_bottom(self) -> SessionView:
        return self._run(self._jump_edge, True)

    def _navigable(self) -> bool:
        return self.mode == SessionMode.VIEWING

    def _scroll(self, delta: int) -> None:
        if self._navigable():
            self._move_cursor(self.viewport.cursor_line + delta)

    def _page(self, pages: int) -> None:
        if not self._navigable():
            return
        step = pages * self.viewport.viewport_height
        self.viewport.scroll_offset = self._clamp_offset(self.viewport.scroll_offset + step)
        self._move_cursor(self.viewport.cursor_line + step)

    def _jump_edge(self, bottom: bool) -> None:
        if self._navigable():
            self._move_cursor(self.store.total_lines if bottom else 1)

    def _jump(self, line: int) -> None:
        if not self._navigable():
            return
        self.store.get(line)
        half = self.viewport.viewport_height // 2
        self.viewport.scroll_offset = self._clamp_offset(line - 1 - half)
        self._move_cursor(line)
        self.message = f"Jumped to line {line}"

    def _move_cursor(self, line: int) -> None:
        total = self.store.total_lines
        if total == 0:
            self.viewport.cursor_line = 0
            self.viewport.scroll_offset = 0
            return
        self.viewport.cursor_line = min(max(line, 1), total)
        self._follow_cursor()

    def _clamp_offset(self, offset: int) -> int:
        highest = max(0, self.store.total_lines - self.viewport.viewport_height)
        return min(max(offset, 0), highest)

    def _follow_cursor(self) -> None:
        """Scroll so the cursor is visible, keeping ``scroll_margin`` lines around it."""
        total = self.store.total_lines
        if total == 0:
            self.viewport.cursor_line = 0
            self.viewport.scroll_offset = 0
            return
        height = self.viewport.viewport_height
        cursor_index = min(max(self.viewport.cursor_line, 1), total) - 1
        self.viewport.cursor_line = cursor_index + 1
        margin = min(self.scroll_margin, (height - 1) // 2)

        offset = self.viewport.scroll_offset
        if cursor_index < offset + margin:
            offset = cursor_index - margin
        elif cursor_index > offset + height - 1 - margin:
            offset = cursor_index - (height - 1 - margin)
        self.viewport.scroll_offset = self._clamp_offset(offset)

    # --- editing --------------------------------------------------------

    def begin_edit(self, line: int | None = None) -> SessionView:
        return self._run(self._begin, EditKind.UPDATE, line)

    def commit_edit(self, text: str) -> SessionView:
        return self._run(self._commit_edit, text)

    def cancel_edit(self) -> SessionView:
        return self._run(self._cancel_edit)

    def begin_delete(self, line: int | None = None) -> SessionView:
        return self._run(self._begin, EditKind.DELETE, line)

    def confirm_delete(self) -> SessionView:
        return self._run(self._confirm_delete, expires_delete=False)

    def dismiss(self) -> SessionView:
        """Any input with no action of its own; expires a pending delete confirmation."""
        return self._run(self._noop)

    def resolve_conflict(self, choice: ConflictChoice | str) -> SessionView:
        return self._run(self._resolve_conflict, ConflictChoice(choice))

    def _begin(self, kind: EditKind, line: int | None) -> None:
        if self.read_only:
            verb = "editing" if kind == EditKind.UPDATE else "deleting"
            raise ReadOnlyError(f"Read-only mode: {verb} disabled")
        if self.mode != SessionMode.VIEWING:
            raise InvalidTransitionError(f"Cannot start {kind} while {self.mode}")

        number = self.viewport.cursor_line if line is None else line
        if number < 1 or number > self.store.total_lines:
            return
        content = self.store.get(number).raw_content

        self._move_cursor(number)
        self.pending = EditOperation(
            line_number=number,
            original_content=content,
            new_content=content if kind == EditKind.UPDATE else "",
            kind=kind,
        )
        if kind == EditKind.UPDATE:
            self.mode = SessionMode.EDITING
            self.message = None
        else:
            self.mode = SessionMode.CONFIRMING_DELETE
            self.message = f"Delete line {number}? Repeat to confirm, any other key cancels"

    def _commit_edit(self, text: str) -> None:
        if self.mode != SessionMode.EDITING or self.pending is None:
            raise InvalidTransitionError(f"No edit in progress ({self.mode})")
        if text == self.pending.original_content:
            self.pending = None
            self.mode = SessionMode.VIEWING
            self.message = "No changes"
            return
        if any(ch in text for ch in _FORBIDDEN_IN_LINE):
            raise InvalidContentError("A line cannot contain line breaks or null bytes")

        self.pending = self.pending.model_copy(update={"new_content": text})
        self._apply_pending(force=False)

    def _cancel_edit(self) -> None:
        if self.mode != SessionMode.EDITING:
            raise InvalidTransitionError(f"No edit in progress ({self.mode})")
        self.pending = None
        self.mode = SessionMode.VIEWING
        self.message = "Edit cancelled"

    def _confirm_delete(self) -> None:
        if self.mode != SessionMode.CONFIRMING_DELETE or self.pending is None:
            raise InvalidTransitionError(f"No delete awaiting confirmation ({self.mode})")
        self._apply_pending(force=False)

    def _expire_delete(self) -> None:
        self.pending = None
        self.mode = SessionMode.VIEWING
        self.message = "Delete cancelled"

    def _resolve_conflict(self, choice: ConflictChoice) -> None:
        if self.mode != SessionMode.CONFLICT_PROMPT or self.pending is None:
            raise InvalidTransitionError(f"No conflict to resolve ({self.mode})")

        if choice == ConflictChoice.RELOAD:
            baseline = self.detector.snapshot(self.path)
            store = self._load()
            logger.info(f"Discarded pending {self.pending.kind} and reloaded {self.path}")
            self.store = store
            self._baseline = baseline
            self.pending = None
            self._conflict_return = None
            self.mode = SessionMode.VIEWING
            self._move_cursor(self.viewport.cursor_line)
            self.message = f"Reloaded {store.total_lines} lines from disk"
        elif choice == ConflictChoice.OVERWRITE:
            logger.info(f"Overwriting externally modified {self.path}")
            self._apply_pending(force=True)
        else:
            self.mode = self._conflict_return or SessionMode.VIEWING
            self._conflict_return = None
            self.message = "Save cancelled; change still pending"

    # --- persistence ----------------------------------------------------

    def _apply_pending(self, *, force: bool) -> None:
        op = self.pending
        assert op is not None

        if not force and self.detector.has_changed(self.path, self._baseline):
            self._conflict_return = self.mode
            self.mode = SessionMode.CONFLICT_PROMPT
            self.message = "File changed on disk: reload, overwrite or cancel"
            raise ExternalModificationError(self.path)

        if op.kind == EditKind.UPDATE:
            self.store.update(op.line_number, op.new_content)
            try:
                result = self._save()
            except GliEditorError:
                self.store.update(op.line_number, op.original_content)
                self.mode = SessionMode.EDITING
                raise
            verb = "Saved"
        else:
            removed = self.store.delete(op.line_number)
            try:
                result = self._save()
            except GliEditorError:
                self.store.insert(op.line_number, removed.raw_content)
                self.pending = None
                self.mode = SessionMode.VIEWING
                raise
            verb = "Deleted"

        self._refresh_baseline()
        self.last_save = result
        self.pending = None
        self._conflict_return = None
        self.mode = SessionMode.VIEWING
        self._move_cursor(self.viewport.cursor_line)
        self.message = self._saved_message(verb, op.line_number, result)

    def _save(self) -> SaveResult:
        return save_file(self.store, self.path, backup_manager=self.backup_manager)

    def _refresh_baseline(self) -> None:
        try:
            self._baseline = self.detector.snapshot(self.path)
        except GliEditorError as e:
            # keep the old baseline; the next save then prompts instead of overwriting
            logger.warning(f"Could not refresh modification time of {self.path}: {e}")

    @staticmethod
    def _saved_message(verb: str, line_number: int, result: SaveResult) -> str:
        backup = result.backup_path.name if result.backup_path else "none"
        message = f"{verb} line {line_number} (backup: {backup})"
        if result.prune_warnings:
            message += f"; backup cleanup: {'; '.join(result.prune_warnings)}"
        return message
