"""Tests for logging_utils.py."""

from __future__ import annotations

import logging

import pytest

from gli_editor.logging_utils import configure_logging, level_for


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestLevelFor:
    @pytest.mark.parametrize(
        "verbosity,level",
        [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
    )
    def test_levels(self, verbosity, level):
        assert level_for(verbosity) == level


class TestConfigureLogging:
    def test_writes_to_file(self, tmp_path, restore_root):
        log_file = tmp_path / "gli.log"
        configure_logging(1, log_file)
        logging.getLogger("gli_editor.test").info("saved something")
        for handler in restore_root.handlers:
            handler.flush()
        assert "INFO gli_editor.test: saved something" in log_file.read_text()

    def test_without_file_is_silent(self, restore_root):
        configure_logging(0)
        assert restore_root.level == logging.WARNING
        assert all(isinstance(h, logging.NullHandler) for h in restore_root.handlers)
