"""Tests for core/file_io.py: loading, line endings and atomic saves."""

from __future__ import annotations

import errno
import os
import stat
from pathlib import Path

import pytest

from gli_editor.core.backup import BackupManager
from gli_editor.core.file_io import detect_line_ending, load_file, save_file, split_lines
from gli_editor.core.models import LineEnding, LineKind
from gli_editor.errors import (
    InvalidEncodingError,
    IoFailureError,
    NotFoundError,
    PermissionDeniedError,
    WriteFailureError,
)


def _leftover_temp_files(directory: Path) -> list[Path]:
    return [p for p in directory.iterdir() if p.name.endswith(".tmp")]


class TestLineEndings:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("a\r\nb\r\n", LineEnding.CRLF),
            ("a\nb\n", LineEnding.LF),
            ("a\rb\r", LineEnding.CR),
            ("a\nb\r\n", LineEnding.CRLF),
        ],
    )
    def test_detect(self, text, expected):
        assert detect_line_ending(text) == expected

    def test_default_without_terminator(self):
        assert detect_line_ending("single", LineEnding.CRLF) == LineEnding.CRLF

    def test_split(self):
        assert split_lines("a\nb\n", LineEnding.LF) == (["a", "b"], True)
        assert split_lines("a\nb", LineEnding.LF) == (["a", "b"], False)
        assert split_lines("", LineEnding.LF) == ([], False)
        assert split_lines("\n", LineEnding.LF) == ([""], True)


class TestLoad:
    def test_example_file(self, example_file):
        store = load_file(example_file)
        assert store.total_lines == 2
        assert store.get(1).kind == LineKind.COMMENT
        assert store.get(2).kind == LineKind.FINGERPRINT
        assert store.line_ending == LineEnding.LF
        assert store.path == example_file

    def test_crlf_lines_have_no_carriage_returns(self, write_ignore):
        store = load_file(write_ignore("# a\r\n# b\r\n"))
        assert [r.raw_content for r in store] == ["# a", "# b"]
        assert store.line_ending == LineEnding.CRLF

    def test_empty_file(self, write_ignore):
        store = load_file(write_ignore(""))
        assert store.total_lines == 0
        assert store.range(0, 0) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError) as exc_info:
            load_file(tmp_path / ".gitleaksignore")
        assert "touch" in str(exc_info.value)

    def test_directory(self, tmp_path):
        with pytest.raises(IoFailureError):
            load_file(tmp_path)

    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores modes")
    def test_permission_denied(self, write_ignore):
        path = write_ignore("# x\n")
        path.chmod(0)
        try:
            with pytest.raises(PermissionDeniedError):
                load_file(path)
        finally:
            path.chmod(stat.S_IRUSR | stat.S_IWUSR)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / ".gitleaksignore"
        _ = path.write_bytes(b"# ok\n\xff\xfe bad\n")
        with pytest.raises(InvalidEncodingError) as exc_info:
            load_file(path)
        assert exc_info.value.code == "invalid_encoding"

    def test_null_byte(self, write_ignore):
        with pytest.raises(InvalidEncodingError) as exc_info:
            load_file(write_ignore("# ok\nbad\x00line\n"))
        assert "line 2" in str(exc_info.value)


class TestRoundTrip:
    @pytest.mark.parametrize(
        "content",
        [
            "# a\nb\n\n",
            "# a\r\nb\r\n\r\n",
            "# a\rb\r",
            "",
        ],
    )
    def test_unchanged_save_is_byte_identical(self, write_ignore, content):
        path = write_ignore(content)
        save_file(load_file(path))
        assert path.read_bytes() == content.encode("utf-8")

    def test_missing_final_newline_is_added_by_default(self, write_ignore):
        path = write_ignore("# a\n# b")
        save_file(load_file(path))
        assert path.read_bytes() == b"# a\n# b\n"

    def test_missing_final_newline_can_be_preserved(self, write_ignore):
        path = write_ignore("# a\r\n# b")
        save_file(load_file(path, preserve_missing_final_newline=True))
        assert path.read_bytes() == b"# a\r\n# b"

    def test_edit_keeps_crlf(self, write_ignore):
        path = write_ignore("# a\r\n# b\r\n")
        store = load_file(path)
        store.update(2, "# changed")
        save_file(store)
        assert path.read_bytes() == b"# a\r\n# changed\r\n"


class TestSave:
    def test_backup_holds_previous_content(self, example_file):
        before = example_file.read_bytes()
        store = load_file(example_file)
        store.update(1, "# changed")
        result = save_file(store)
        assert result.path == example_file
        assert result.backup_path is not None
        assert result.backup_path.read_bytes() == before
        assert example_file.read_text().startswith("# changed\n")
        assert _leftover_temp_files(example_file.parent) == []

    def test_preserves_file_mode(self, example_file):
        example_file.chmod(0o640)
        save_file(load_file(example_file))
        assert stat.S_IMODE(example_file.stat().st_mode) == 0o640

    def test_prunes_old_backups(self, example_file):
        store = load_file(example_file)
        manager = BackupManager(max_backups=2)
        for _ in range(4):
            save_file(store, backup_manager=manager)
        assert len(manager.list_backups(example_file)) == 2

    def test_disk_full_leaves_original(self, example_file, monkeypatch):
        before = example_file.read_bytes()
        store = load_file(example_file)
        store.update(2, "# replaced")

        def fail_replace(src, dst):
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr("gli_editor.core.file_io.os.replace", fail_replace)
        with pytest.raises(WriteFailureError) as exc_info:
            save_file(store)

        error = exc_info.value
        assert example_file.read_bytes() == before
        assert error.backup_path is not None
        assert error.backup_path.read_bytes() == before
        assert "No space left on device" in str(error)
        assert str(error.backup_path) in str(error)
        assert "unmodified" in str(error)
        assert _leftover_temp_files(example_file.parent) == []

    def test_fsync_failure_leaves_original(self, example_file, monkeypatch):
        before = example_file.read_bytes()
        store = load_file(example_file)
        store.delete(1)

        def fail_fsync(fd):
            raise OSError(errno.EIO, "Input/output error")

        monkeypatch.setattr("gli_editor.core.file_io.os.fsync", fail_fsync)
        with pytest.raises(WriteFailureError):
            save_file(store)
        assert example_file.read_bytes() == before
        assert _leftover_temp_files(example_file.parent) == []

    def test_backup_failure_aborts_before_write(self, example_file, monkeypatch):
        before = example_file.read_bytes()
        store = load_file(example_file)
        store.update(1, "# never written")

        def fail_copy(src, dst):
            raise OSError(errno.EACCES, "Permission denied")

        monkeypatch.setattr("gli_editor.core.backup.shutil.copy", fail_copy)
        with pytest.raises(WriteFailureError) as exc_info:
            save_file(store)
        assert exc_info.value.backup_path is None
        assert "No backup was taken" in str(exc_info.value)
        assert example_file.read_bytes() == before

    def test_prune_failure_does_not_fail_save(self, example_file):
        class BrokenListing(BackupManager):
            def list_backups(self, path):
                raise OSError(errno.EIO, "listing failed")

        store = load_file(example_file)
        store.update(1, "# saved anyway")
        result = save_file(store, backup_manager=BrokenListing())
        assert example_file.read_text().startswith("# saved anyway\n")
        assert result.prune_warnings
        assert result.pruned == []

    def test_writes_through_symlink(self, tmp_path):
        real = tmp_path / "real.ignore"
        _ = real.write_text("# old\n# keep\n")
        link = tmp_path / ".gitleaksignore"
        link.symlink_to(real)

        store = load_file(link)
        store.update(1, "# new")
        result = save_file(store)

        assert link.is_symlink()
        assert real.read_text() == "# new\n# keep\n"
        assert result.path == link
        assert result.backup_path is not None
        assert result.backup_path.name.startswith("real.ignore.backup.")
        assert result.backup_path.read_text() == "# old\n# keep\n"
        assert _leftover_temp_files(tmp_path) == []

    def test_store_without_path(self):
        from gli_editor.core.line_store import LineStore

        with pytest.raises(WriteFailureError):
            save_file(LineStore.load_from_lines(["a"]))
