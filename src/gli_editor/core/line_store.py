"""Ordered, 1-indexed collection of classified lines for one file."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path

from gli_editor.core.classifier import classify
from gli_editor.core.models import LineEnding, LineRecord
from gli_editor.errors import OutOfBoundsError


def _record(line_number: int, raw_content: str) -> LineRecord:
    return LineRecord(
        line_number=line_number,
        raw_content=raw_content,
        classification=classify(raw_content),
    )


class LineStore:
    """Line records numbered 1..N with no gaps.

    ``line_ending`` and ``final_terminator`` are fixed when the store is
    built; edits never re-detect them.
    """

    def __init__(
        self,
        records: list[LineRecord],
        line_ending: LineEnding = LineEnding.LF,
        path: Path | None = None,
        *,
        final_terminator: bool = True,
    ) -> None:
        self._records = records
        self.line_ending = line_ending
        self.path = path
        self.final_terminator = final_terminator

    @classmethod
    def load_from_lines(
        cls,
        lines: Sequence[str],
        ending: LineEnding = LineEnding.LF,
        path: Path | None = None,
        *,
        final_terminator: bool = True,
    ) -> LineStore:
        records = [_record(number, content) for number, content in enumerate(lines, 1)]
        return cls(records, ending, path, final_terminator=final_terminator)

    @property
    def total_lines(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LineRecord]:
        return iter(self._records)

    def _check(self, line_number: int) -> None:
        if line_number < 1 or line_number > len(self._records):
            raise OutOfBoundsError(line_number, len(self._records))

    def get(self, line_number: int) -> LineRecord:
        self._check(line_number)
        return self._records[line_number - 1]

    def range(self, start: int, end: int) -> list[LineRecord]:
        """Return records start..end inclusive. ``(0, 0)`` is the empty-file sentinel."""
        if start == 0 and end == 0:
            return []
        total = len(self._records)
        if start < 1 or start > total:
            raise OutOfBoundsError(start, total)
        if end > total or end < start:
            raise OutOfBoundsError(end, total)
        return self._records[start - 1 : end]

    def update(self, line_number: int, new_content: str) -> None:
        self._check(line_number)
        self._records[line_number - 1] = _record(line_number, new_content)

    def delete(self, line_number: int) -> LineRecord:
        """Remove a line and renumber everything after it."""
        self._check(line_number)
        removed = self._records.pop(line_number - 1)
        self._renumber_from(line_number - 1)
        return removed

    def insert(self, line_number: int, content: str) -> LineRecord:
        """Insert a line so it becomes ``line_number``; later lines shift down."""
        if line_number < 1 or line_number > len(self._records) + 1:
            raise OutOfBoundsError(line_number, len(self._records))
        record = _record(line_number, content)
        self._records.insert(line_number - 1, record)
        self._renumber_from(line_number)
        return record

    def _renumber_from(self, index: int) -> None:
        for position in range(index, len(self._records)):
            record = self._records[position]
            if record.line_number != position + 1:
                self._records[position] = record.model_copy(update={"line_number": position + 1})

    def serialize(self) -> str:
        if not self._records:
            return ""
        terminator = self.line_ending.terminator
        body = terminator.join(record.raw_content for record in self._records)
        if self.final_terminator:
            return body + terminator
        return body
