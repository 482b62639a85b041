"""Tests for verbose logging."""

from pathlib import Path
from scopetally.verbose import setup_logger
import tempfile
import logging


def test_logger_creates_debug_log():
    """Logger should create the debug file when one is given."""
    with tempfile.TemporaryDirectory() as tmpdir:
        debug_file = Path(tmpdir) / "debug.log"
        logger = setup_logger(debug_file=debug_file, verbose=False)

        assert not logger.disabled
        assert logger.level == logging.DEBUG
        assert debug_file.exists()
        logger.handlers[0].close()


def test_logger_writes_to_file():
    """Logger should write messages to debug file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        debug_file = Path(tmpdir) / "debug.log"
        logger = setup_logger(debug_file=debug_file, verbose=False)

        logger.debug("test message")
        logger.handlers[0].flush()

        content = debug_file.read_text()
        assert "test message" in content
        assert "[" in content  # timestamp
        logger.handlers[0].close()


def test_verbose_mode_adds_stderr_handler(tmp_path):
    """Logger should have stderr handler when verbose=True."""
    logger = setup_logger(debug_file=tmp_path / "debug.log", verbose=True)

    assert len(logger.handlers) == 2
    handler_types = [type(h).__name__ for h in logger.handlers]
    assert "StreamHandler" in handler_types
    assert "FileHandler" in handler_types


def test_non_verbose_mode_only_file_handler(tmp_path):
    """Logger should only have file handler when verbose=False."""
    logger = setup_logger(debug_file=tmp_path / "debug.log", verbose=False)

    assert len(logger.handlers) == 1
    handler_types = [type(h).__name__ for h in logger.handlers]
    assert "FileHandler" in handler_types
    assert "StreamHandler" not in handler_types


def test_no_file_and_not_verbose_discards_messages():
    logger = setup_logger(debug_file=None, verbose=False)

    assert [type(h).__name__ for h in logger.handlers] == ["NullHandler"]
    assert logger.propagate is False


def test_logger_creates_parent_directories(tmp_path):
    """Logger should create parent directories for debug file."""
    debug_file = tmp_path / "nested" / "dir" / "debug.log"
    setup_logger(debug_file=debug_file, verbose=False)

    assert debug_file.exists()
    assert debug_file.parent.exists()


def test_setup_twice_replaces_handlers(tmp_path):
    first = setup_logger(tmp_path / "a.log", verbose=False, logger_name="scopetally_x")
    second = setup_logger(tmp_path / "b.log", verbose=False, logger_name="scopetally_x")

    assert first is second
    assert len(second.handlers) == 1
    assert second.handlers[0].baseFilename == str(tmp_path / "b.log")
