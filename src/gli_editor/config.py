"""EditorConfig dataclass with env var and JSON file overrides."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from gli_editor.core.backup import DEFAULT_MAX_BACKUPS
from gli_editor.core.models import LineEnding
from gli_editor.core.preview import DEFAULT_PREVIEW_CONTEXT

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gli-editor.json"
ENV_PREFIX = "GLI_EDITOR_"


def _safe_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


def _checked_max_backups(value: int, default: int) -> int:
    # at least one backup survives every save
    if value < 1:
        logger.warning(f"max_backups must be at least 1, got {value}; using {default}")
        return default
    return value


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def _parse_ending(value: str, default: LineEnding) -> LineEnding:
    try:
        return LineEnding(value.lower())
    except ValueError:
        logger.warning(f"Unknown line ending {value!r}, using {default}")
        return default


@dataclass
class EditorConfig:
    default_line_ending: LineEnding = LineEnding.LF
    max_backups: int = DEFAULT_MAX_BACKUPS
    scroll_margin: int = 3
    context_lines: int = 3
    preview_enabled: bool = True
    preview_context: int = DEFAULT_PREVIEW_CONTEXT
    preserve_missing_final_newline: bool = False
    poll_interval_ms: int = 100

    @classmethod
    def from_env(cls) -> EditorConfig:
        return _apply_env(cls())

    @classmethod
    def from_file(cls, path: Path) -> EditorConfig:
        """Apply the ``"editor"`` section of a JSON file; env vars still win."""
        config = cls()

        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                section = data.get("editor", {})
                if isinstance(section, dict):
                    _apply(config, section)
            except (json.JSONDecodeError, OSError, AttributeError) as e:
                logger.warning(f"Failed to load editor config from {path}: {e}")

        return _apply_env(config)


def _apply_env(config: EditorConfig) -> EditorConfig:
    env = os.environ

    if value := env.get(f"{ENV_PREFIX}LINE_ENDING"):
        config.default_line_ending = _parse_ending(value, config.default_line_ending)
    if value := env.get(f"{ENV_PREFIX}MAX_BACKUPS"):
        config.max_backups = _checked_max_backups(
            _safe_int(value, config.max_backups), config.max_backups
        )
    if value := env.get(f"{ENV_PREFIX}SCROLL_MARGIN"):
        config.scroll_margin = _safe_int(value, config.scroll_margin)
    if value := env.get(f"{ENV_PREFIX}CONTEXT"):
        config.context_lines = _safe_int(value, config.context_lines)
    if value := env.get(f"{ENV_PREFIX}PREVIEW"):
        config.preview_enabled = _parse_bool(value)
    if value := env.get(f"{ENV_PREFIX}PREVIEW_CONTEXT"):
        config.preview_context = _safe_int(value, config.preview_context)
    if value := env.get(f"{ENV_PREFIX}PRESERVE_FINAL_NEWLINE"):
        config.preserve_missing_final_newline = _parse_bool(value)
    if value := env.get(f"{ENV_PREFIX}POLL_MS"):
        config.poll_interval_ms = _safe_int(value, config.poll_interval_ms)

    return config


def _apply(config: EditorConfig, data: dict[str, object]) -> None:
    ending = data.get("default_line_ending")
    if isinstance(ending, str):
        config.default_line_ending = _parse_ending(ending, config.default_line_ending)
    for name in ("max_backups", "scroll_margin", "context_lines", "preview_context", "poll_interval_ms"):
        value = data.get(name)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            if name == "max_backups":
                value = _checked_max_backups(value, config.max_backups)
            setattr(config, name, value)
    for name in ("preview_enabled", "preserve_missing_final_newline"):
        value = data.get(name)
        if isinstance(value, bool):
            setattr(config, name, value)


def load_editor_config(path: Path | None = None) -> EditorConfig:
    if path is None:
        path = Path.cwd() / CONFIG_FILE_NAME
    return EditorConfig.from_file(path)
