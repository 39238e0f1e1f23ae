from gli_editor.tui.app import TerminalApp, run_app
from gli_editor.tui.keys import Action, LineInput, map_key

__all__ = [
    "Action",
    "LineInput",
    "TerminalApp",
    "map_key",
    "run_app",
]
