"""Pydantic models and enums for the editing core."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class LineEnding(StrEnum):
    LF = "lf"
    CRLF = "crlf"
    CR = "cr"

    @property
    def terminator(self) -> str:
        return _TERMINATORS[self]


_TERMINATORS = {
    LineEnding.LF: "\n",
    LineEnding.CRLF: "\r\n",
    LineEnding.CR: "\r",
}


class LineKind(StrEnum):
    COMMENT = "comment"
    BLANK = "blank"
    FINGERPRINT = "fingerprint"
    INVALID = "invalid"


class Fingerprint(BaseModel):
    model_config = ConfigDict(frozen=True)

    commit_hash: str
    file_path: str
    rule_id: str
    source_line: int


class Classification(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: LineKind
    fingerprint: Fingerprint | None = None


class LineRecord(BaseModel):
    line_number: int = Field(ge=1)
    raw_content: str
    classification: Classification

    @property
    def kind(self) -> LineKind:
        return self.classification.kind


class EditKind(StrEnum):
    UPDATE = "update"
    DELETE = "delete"


def _now() -> datetime:
    return datetime.now(UTC)


class EditOperation(BaseModel):
    """A pending single-line change, alive between begin and commit/cancel."""

    line_number: int
    original_content: str
    new_content: str
    kind: EditKind
    timestamp: datetime = Field(default_factory=_now)


class SessionMode(StrEnum):
    VIEWING = "viewing"
    EDITING = "editing"
    CONFIRMING_DELETE = "confirming_delete"
    CONFLICT_PROMPT = "conflict_prompt"


class ViewportState(BaseModel):
    scroll_offset: int = Field(default=0, ge=0)
    cursor_line: int = Field(default=0, ge=0)  # 0: no line (empty file)
    viewport_height: int = Field(default=20, ge=1)


class SaveResult(BaseModel):
    path: Path
    backup_path: Path | None = None
    pruned: list[Path] = Field(default_factory=list)
    prune_warnings: list[str] = Field(default_factory=list)


class SessionView(BaseModel):
    """Everything the renderer needs to draw one frame."""

    path: Path
    mode: SessionMode
    viewport: ViewportState
    total_lines: int
    visible: list[LineRecord] = Field(default_factory=list)
    pending: EditOperation | None = None
    message: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    read_only: bool = False

    @property
    def cursor_line(self) -> int:
        return self.viewport.cursor_line
