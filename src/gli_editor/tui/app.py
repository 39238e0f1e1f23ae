"""Curses front end: draws SessionView frames and feeds key presses to the session."""

from __future__ import annotations

import curses
import logging
import os
from dataclasses import dataclass, field

from gli_editor.config import EditorConfig
from gli_editor.core.models import LineKind, SessionMode, SessionView
from gli_editor.core.preview import PreviewContent, PreviewError, read_preview
from gli_editor.core.session import ConflictChoice, EditSession
from gli_editor.tui.keys import Action, Key, LineInput, map_key

logger = logging.getLogger(__name__)

HEADER_ROWS = 1
STATUS_ROWS = 1
INPUT_ROWS = 1
GUTTER_WIDTH = 6

_KIND_COLORS = {
    LineKind.COMMENT: curses.COLOR_CYAN,
    LineKind.FINGERPRINT: curses.COLOR_GREEN,
    LineKind.INVALID: curses.COLOR_RED,
}


@dataclass
class TerminalApp:
    session: EditSession
    config: EditorConfig = field(default_factory=EditorConfig)
    preview_enabled: bool = True
    should_quit: bool = False
    edit_input: LineInput | None = None
    jump_input: LineInput | None = None
    _colors: dict[LineKind, int] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        self.preview_enabled = self.preview_enabled and self.config.preview_enabled

    # --- input ----------------------------------------------------------

    def handle_key(self, key: Key) -> SessionView:
        if self.jump_input is not None:
            return self._handle_jump_key(key)

        session = self.session
        action = map_key(session.mode, key)
        if action is None:
            return session.view()

        match action:
            case Action.QUIT:
                self.should_quit = True
                return session.view()
            case Action.EDIT:
                view = session.begin_edit()
                if view.mode == SessionMode.EDITING and view.pending is not None:
                    self.edit_input = LineInput.with_text(view.pending.original_content)
                return view
            case Action.DELETE:
                return session.begin_delete()
            case Action.CONFIRM_DELETE:
                return session.confirm_delete()
            case Action.DISMISS:
                return session.dismiss()
            case Action.SCROLL_UP:
                return session.scroll(-1)
            case Action.SCROLL_DOWN:
                return session.scroll(1)
            case Action.PAGE_UP:
                return session.page(-1)
            case Action.PAGE_DOWN:
                return session.page(1)
            case Action.TOP:
                return session.jump_top()
            case Action.BOTTOM:
                return session.jump_bottom()
            case Action.TOGGLE_PREVIEW:
                self.preview_enabled = not self.preview_enabled
                return session.dismiss()
            case Action.JUMP_PROMPT:
                view = session.dismiss()
                self.jump_input = LineInput()
                return view
            case Action.CLEAR_MESSAGE:
                return session.clear_message()
            case Action.SAVE:
                return self._commit()
            case Action.CANCEL:
                if session.mode == SessionMode.CONFLICT_PROMPT:
                    return session.resolve_conflict(ConflictChoice.CANCEL)
                self.edit_input = None
                return session.cancel_edit()
            case Action.INPUT:
                if self.edit_input is not None:
                    self.edit_input.handle_key(key)
                return session.view()
            case Action.RELOAD:
                view = session.resolve_conflict(ConflictChoice.RELOAD)
                if view.mode == SessionMode.VIEWING:
                    self.edit_input = None
                return view
            case Action.OVERWRITE:
                view = session.resolve_conflict(ConflictChoice.OVERWRITE)
                if view.mode == SessionMode.VIEWING:
                    self.edit_input = None
                return view
        return session.view()

    def _commit(self) -> SessionView:
        text = self.edit_input.text if self.edit_input is not None else ""
        view = self.session.commit_edit(text)
        if view.mode == SessionMode.VIEWING:
            self.edit_input = None
        return view

    def _handle_jump_key(self, key: Key) -> SessionView:
        assert self.jump_input is not None
        if key == "\x1b" or key == "\x03":
            self.jump_input = None
            return self.session.view()
        if key in ("\n", "\r", curses.KEY_ENTER):
            text = self.jump_input.text.strip()
            self.jump_input = None
            if text.isdigit():
                return self.session.jump(int(text))
            return self.session.view()
        if isinstance(key, str) and not key.isdigit() and key.isprintable():
            return self.session.view()
        self.jump_input.handle_key(key)
        return self.session.view()

    # --- drawing --------------------------------------------------------

    def _init_colors(self) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        curses.use_default_colors()
        for pair, (kind, color) in enumerate(_KIND_COLORS.items(), 1):
            curses.init_pair(pair, color, -1)
            self._colors[kind] = curses.color_pair(pair)

    def content_height(self, screen_height: int) -> int:
        reserved = HEADER_ROWS + STATUS_ROWS
        if self.edit_input is not None or self.jump_input is not None:
            reserved += INPUT_ROWS
        return max(1, screen_height - reserved)

    def draw(self, stdscr: curses.window) -> None:
        height, width = stdscr.getmaxyx()
        view = self.session.resize(self.content_height(height))
        stdscr.erase()

        title = f" {view.path.name} - {view.total_lines} lines"
        if view.read_only:
            title += " [read-only]"
        _put(stdscr, 0, 0, title.ljust(width), width, curses.A_REVERSE)

        preview = self._preview() if self.preview_enabled else None
        list_width = width // 2 if preview is not None else width
        self._draw_lines(stdscr, view, list_width)
        if preview is not None:
            self._draw_preview(stdscr, preview, list_width, width - list_width)

        row = HEADER_ROWS + view.viewport.viewport_height
        if self.edit_input is not None and view.pending is not None:
            prompt = f"edit {view.pending.line_number}> "
            _put(stdscr, row, 0, prompt + self.edit_input.text, width)
            row += 1
        elif self.jump_input is not None:
            _put(stdscr, row, 0, ":" + self.jump_input.text, width)
            row += 1

        _put(stdscr, row, 0, _status_text(view).ljust(width), width, curses.A_REVERSE)
        stdscr.noutrefresh()
        curses.doupdate()

    def _draw_lines(self, stdscr: curses.window, view: SessionView, width: int) -> None:
        for index, record in enumerate(view.visible):
            row = HEADER_ROWS + index
            is_current = record.line_number == view.cursor_line
            marker = ">" if is_current else " "
            gutter = f"{marker}{record.line_number:>4} "
            attr = self._colors.get(record.kind, curses.A_NORMAL)
            if is_current:
                attr |= curses.A_REVERSE
            _put(stdscr, row, 0, gutter, width, curses.A_BOLD if is_current else curses.A_DIM)
            _put(stdscr, row, GUTTER_WIDTH, record.raw_content, width - GUTTER_WIDTH, attr)

    def _preview(self) -> PreviewContent | str | None:
        target = self.session.preview_target()
        if target is None:
            return None
        file_path, source_line = target
        try:
            return read_preview(
                file_path,
                source_line,
                base_dir=self.session.path.parent,
                context=self.config.preview_context,
            )
        except PreviewError as e:
            return str(e)

    def _draw_preview(
        self, stdscr: curses.window, preview: PreviewContent | str, left: int, width: int
    ) -> None:
        rows = self.session.viewport.viewport_height
        if isinstance(preview, str):
            _put(stdscr, HEADER_ROWS, left, f"| {preview}", width, curses.A_DIM)
            return
        _put(stdscr, HEADER_ROWS, left, f"| {preview.file_path}", width, curses.A_BOLD)
        for index, line in enumerate(preview.lines[: max(0, rows - 1)]):
            number = preview.start_line + index
            attr = curses.A_REVERSE if number == preview.target_line else curses.A_NORMAL
            _put(stdscr, HEADER_ROWS + 1 + index, left, f"|{number:>5} {line}", width, attr)

    def run(self, stdscr: curses.window) -> None:
        curses.raw()
        curses.curs_set(0)
        stdscr.keypad(True)
        stdscr.timeout(self.config.poll_interval_ms)
        self._init_colors()

        while not self.should_quit:
            self.draw(stdscr)
            try:
                key = stdscr.get_wch()
            except curses.error:
                continue
            if key == curses.KEY_RESIZE:
                continue
            self.handle_key(key)


def _status_text(view: SessionView) -> str:
    if view.error_message:
        return f" ERROR: {view.error_message.splitlines()[0]}"
    if view.mode == SessionMode.EDITING:
        return " EDIT | Enter/Esc:save  Ctrl+C:cancel"
    if view.mode == SessionMode.CONFLICT_PROMPT:
        return " CONFLICT | file changed on disk: r:reload  o:overwrite  c:cancel"
    if view.message:
        return f" {view.message}"
    position = f"{view.cursor_line}/{view.total_lines}"
    return f" VIEW {position} | i:edit x:delete j/k:move u/d:page g/G:top/bottom :jump p:preview q:quit"


def _put(stdscr: curses.window, row: int, col: int, text: str, width: int, attr: int = 0) -> None:
    if width <= 0:
        return
    try:
        stdscr.addnstr(row, col, text, width, attr)
    except curses.error:
        # writing the bottom-right cell moves the cursor off screen
        pass


def run_app(session: EditSession, config: EditorConfig) -> None:
    os.environ.setdefault("ESCDELAY", "25")
    app = TerminalApp(session=session, config=config)
    curses.wrapper(app.run)
