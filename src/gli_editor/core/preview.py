"""Source context for the fingerprint under the cursor.

Independent of the editing core: it only takes a path and a line number and
reports its own PreviewError.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_PREVIEW_CONTEXT = 10


class PreviewError(Exception):
    """Raised when the referenced source file cannot be previewed."""


@dataclass
class PreviewContent:
    file_path: str
    target_line: int
    start_line: int
    lines: list[str] = field(default_factory=list)


def resolve_source_path(file_path: str, base_dir: Path | None) -> Path:
    candidate = Path(file_path)
    if candidate.is_absolute() or base_dir is None:
        return candidate
    return base_dir / candidate


def read_preview(
    file_path: str,
    source_line: int,
    *,
    base_dir: Path | None = None,
    context: int = DEFAULT_PREVIEW_CONTEXT,
) -> PreviewContent:
    """Return up to ``context`` lines either side of ``source_line``.

    Target lines past the end of the file are clamped to the last line.
    """
    path = resolve_source_path(file_path, base_dir)
    try:
        with path.open(encoding="utf-8", errors="replace") as fh:
            line_count = sum(1 for _ in fh)
            if line_count == 0:
                raise PreviewError(f"Preview file is empty: {file_path}")
            target = min(max(source_line, 1), line_count)
            start = max(target - context, 1)
            end = min(target + context, line_count)
            fh.seek(0)
            lines = [
                line.rstrip("\r\n") for line in itertools.islice(fh, start - 1, end)
            ]
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        raise PreviewError(f"Preview file not found: {file_path}")
    except OSError as e:
        raise PreviewError(f"Cannot read {file_path}: {e}")

    return PreviewContent(file_path=file_path, target_line=target, start_line=start, lines=lines)
