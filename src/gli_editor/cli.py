"""CLI entry point for gli-editor."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import cast

from gli_editor import __version__
from gli_editor.config import EditorConfig, load_editor_config
from gli_editor.core.line_spec import LineSpec
from gli_editor.core.session import EditSession
from gli_editor.errors import GliEditorError
from gli_editor.logging_utils import configure_logging

logger = logging.getLogger(__name__)

DEFAULT_FILE = Path("./.gitleaksignore")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gli-editor",
        description="Terminal editor for .gitleaksignore files",
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"gli-editor {__version__}"
    )
    _ = parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=DEFAULT_FILE,
        help="Path to .gitleaksignore file (default: ./.gitleaksignore)",
    )
    _ = parser.add_argument(
        "-l",
        "--lines",
        default=None,
        help="Line specification: 42, 10-50 or 42+5",
    )
    _ = parser.add_argument(
        "-C",
        "--context",
        type=int,
        default=None,
        help="Number of context lines around a single target line",
    )
    _ = parser.add_argument(
        "-r",
        "--read-only",
        action="store_true",
        dest="read_only",
        help="Launch in read-only mode (disable editing)",
    )
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON config file (default: ./.gli-editor.json)",
    )
    _ = parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        dest="log_file",
        help="Write log records to this file",
    )
    _ = parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (can be repeated)",
    )
    return parser


def open_session(args: argparse.Namespace) -> tuple[EditSession, EditorConfig]:
    """Load config and file, then place the cursor per ``--lines``."""
    config = load_editor_config(cast(Path | None, args.config))
    context = cast(int | None, args.context)
    if context is None:
        context = config.context_lines

    lines = cast(str | None, args.lines)
    spec = LineSpec.parse(lines, context) if lines else LineSpec.all()

    session = EditSession.open(cast(Path, args.file), config, read_only=bool(args.read_only))
    start, _end = spec.calculate_range(session.total_lines)
    focus = spec.focus_line
    if focus is not None and start > 0:
        session.jump(focus)
        session.clear_message()
    return session, config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(cast(int, args.verbose), cast(Path | None, args.log_file))

    try:
        session, config = open_session(args)
    except GliEditorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    from gli_editor.tui.app import run_app

    try:
        run_app(session, config)
    except KeyboardInterrupt:
        return 130
    logger.info(f"Exited editing {session.path}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
