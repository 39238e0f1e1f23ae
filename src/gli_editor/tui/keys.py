"""Key codes to session actions, plus the single-line text input."""

from __future__ import annotations

import curses
from dataclasses import dataclass
from enum import StrEnum

from gli_editor.core.models import SessionMode

# get_wch() yields str for characters (control characters included) and int
# for function keys.
Key = int | str

KEY_ESC = "\x1b"
KEY_CTRL_C = "\x03"
ENTER_KEYS: frozenset[Key] = frozenset({"\n", "\r", curses.KEY_ENTER})
BACKSPACE_KEYS: frozenset[Key] = frozenset({"\x08", "\x7f", curses.KEY_BACKSPACE})


class Action(StrEnum):
    QUIT = "quit"
    EDIT = "edit"
    DELETE = "delete"
    CONFIRM_DELETE = "confirm_delete"
    DISMISS = "dismiss"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    TOP = "top"
    BOTTOM = "bottom"
    TOGGLE_PREVIEW = "toggle_preview"
    JUMP_PROMPT = "jump_prompt"
    CLEAR_MESSAGE = "clear_message"
    SAVE = "save"
    CANCEL = "cancel"
    INPUT = "input"
    RELOAD = "reload"
    OVERWRITE = "overwrite"


_VIEW_KEYS: dict[Key, Action] = {
    "q": Action.QUIT,
    "i": Action.EDIT,
    "x": Action.DELETE,
    "k": Action.SCROLL_UP,
    curses.KEY_UP: Action.SCROLL_UP,
    "j": Action.SCROLL_DOWN,
    curses.KEY_DOWN: Action.SCROLL_DOWN,
    "u": Action.PAGE_UP,
    curses.KEY_PPAGE: Action.PAGE_UP,
    "d": Action.PAGE_DOWN,
    curses.KEY_NPAGE: Action.PAGE_DOWN,
    "g": Action.TOP,
    curses.KEY_HOME: Action.TOP,
    "G": Action.BOTTOM,
    curses.KEY_END: Action.BOTTOM,
    "p": Action.TOGGLE_PREVIEW,
    ":": Action.JUMP_PROMPT,
    KEY_ESC: Action.CLEAR_MESSAGE,
}
_VIEW_KEYS.update({key: Action.EDIT for key in ENTER_KEYS})

_CONFLICT_KEYS: dict[Key, Action] = {
    "r": Action.RELOAD,
    "o": Action.OVERWRITE,
    "c": Action.CANCEL,
    KEY_ESC: Action.CANCEL,
}


def map_key(mode: SessionMode, key: Key) -> Action | None:
    if mode == SessionMode.EDITING:
        if key in ENTER_KEYS or key == KEY_ESC:
            return Action.SAVE
        if key == KEY_CTRL_C:
            return Action.CANCEL
        return Action.INPUT
    if mode == SessionMode.CONFLICT_PROMPT:
        return _CONFLICT_KEYS.get(key)
    if mode == SessionMode.CONFIRMING_DELETE:
        if key == "x":
            return Action.CONFIRM_DELETE
        action = _VIEW_KEYS.get(key)
        if action is None or action == Action.DELETE:
            return Action.DISMISS
        return action
    return _VIEW_KEYS.get(key)


@dataclass
class LineInput:
    """Editable single line with a cursor."""

    text: str = ""
    cursor: int = 0

    @classmethod
    def with_text(cls, text: str) -> LineInput:
        return cls(text=text, cursor=len(text))

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def backspace(self) -> None:
        if self.cursor > 0:
            self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
            self.cursor -= 1

    def delete(self) -> None:
        if self.cursor < len(self.text):
            self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]

    def handle_key(self, key: Key) -> bool:
        """Apply an editing key; False if the key means nothing to the input."""
        if key in BACKSPACE_KEYS:
            self.backspace()
        elif key == curses.KEY_DC:
            self.delete()
        elif key == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
        elif key == curses.KEY_RIGHT:
            self.cursor = min(len(self.text), self.cursor + 1)
        elif key == curses.KEY_HOME:
            self.cursor = 0
        elif key == curses.KEY_END:
            self.cursor = len(self.text)
        elif isinstance(key, str) and key.isprintable():
            self.insert(key)
        else:
            return False
        return True
