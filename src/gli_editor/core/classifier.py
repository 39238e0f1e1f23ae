"""Line classification for .gitleaksignore entries.

A fingerprint has the shape ``<commit>:<path>:<rule-id>:<line>``. The path may
itself contain ``:`` (nested archive paths), so the first and the last two
fields are taken from the ends and everything in between is the path.
"""

from __future__ import annotations

import string

from gli_editor.core.models import Classification, Fingerprint, LineKind

COMMIT_HASH_LENGTH = 40
MIN_FINGERPRINT_FIELDS = 4

_HEX_DIGITS = frozenset(string.hexdigits)
_ASCII_DIGITS = frozenset(string.digits)

_COMMENT = Classification(kind=LineKind.COMMENT)
_BLANK = Classification(kind=LineKind.BLANK)
_INVALID = Classification(kind=LineKind.INVALID)


def is_commit_hash(value: str) -> bool:
    return len(value) == COMMIT_HASH_LENGTH and all(c in _HEX_DIGITS for c in value)


def _parse_source_line(value: str) -> int | None:
    # int() would also accept whitespace, signs and underscores
    if not value or not all(c in _ASCII_DIGITS for c in value):
        return None
    return int(value)


def parse_fingerprint(raw_content: str) -> Fingerprint | None:
    """Return the fingerprint fields of a line, or None if it is not one."""
    parts = raw_content.split(":")
    if len(parts) < MIN_FINGERPRINT_FIELDS:
        return None

    commit_hash = parts[0]
    if not is_commit_hash(commit_hash):
        return None

    source_line = _parse_source_line(parts[-1])
    if source_line is None:
        return None

    rule_id = parts[-2]
    file_path = ":".join(parts[1:-2])
    if not file_path or not rule_id:
        return None

    return Fingerprint(
        commit_hash=commit_hash,
        file_path=file_path,
        rule_id=rule_id,
        source_line=source_line,
    )


def classify(raw_content: str) -> Classification:
    """Classify one line. Total: malformed input yields INVALID, never an error."""
    trimmed = raw_content.strip()
    if not trimmed:
        return _BLANK
    if trimmed.startswith("#"):
        return _COMMENT

    fingerprint = parse_fingerprint(raw_content)
    if fingerprint is None:
        return _INVALID
    return Classification(kind=LineKind.FINGERPRINT, fingerprint=fingerprint)
