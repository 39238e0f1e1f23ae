"""Shared fixtures for gli-editor tests."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

COMMIT = "0123456789abcdef0123456789abcdef01234567"


def _fingerprint(path: str, rule: str, line: int, commit: str = COMMIT) -> str:
    return f"{commit}:{path}:{rule}:{line}"


@pytest.fixture
def commit_hash() -> str:
    return COMMIT


@pytest.fixture
def make_fingerprint() -> Callable[..., str]:
    return _fingerprint


@pytest.fixture
def write_ignore(tmp_path: Path) -> Callable[..., Path]:
    """Write raw text (no newline translation) to an ignore file and return its path."""

    def _write(content: str, name: str = ".gitleaksignore") -> Path:
        path = tmp_path / name
        _ = path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def example_file(write_ignore: Callable[..., Path]) -> Path:
    """Two lines: a comment and a fingerprint."""
    return write_ignore(f"# note\n{_fingerprint('dir/f.go', 'rule-x', 12)}\n")


@pytest.fixture
def long_file(write_ignore: Callable[..., Path]) -> Path:
    """100 fingerprint lines, line N points at src/file_N.py."""
    lines = [_fingerprint(f"src/file_{n}.py", "generic-api-key", n) for n in range(1, 101)]
    return write_ignore("\n".join(lines) + "\n")


@pytest.fixture
def bump_mtime() -> Callable[[Path], None]:
    """Move a file's mtime five seconds forward, as an external writer would."""

    def _bump(path: Path) -> None:
        stat = path.stat()
        os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))

    return _bump
