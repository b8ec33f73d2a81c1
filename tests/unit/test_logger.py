"""
Unit tests for session logging.

Tests setup_logger and the context logger setup functions.
"""

import sys

import pytest
from loguru import logger

from anken.contexts.autofill.logger import _log_debug, setup_autofill_logger
from anken.contexts.intake.logger import setup_intake_logger
from anken.utils.logger import setup_logger


@pytest.fixture(autouse=True)
def restore_default_sink():
    """
    Put loguru back on stderr after each test.

    Tests call logger.remove() before reading a log file so the sink is
    closed and flushed.
    """
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestSetupLogger:
    """Tests for setup_logger."""

    def test_creates_log_file_in_session_dir(self, tmp_path):
        """The session directory is created and holds <context>.log."""
        log_file = setup_logger("intake", tmp_path / "session")

        assert log_file == tmp_path / "session" / "intake.log"
        assert log_file.exists()

    def test_header_lists_session_facts(self, tmp_path):
        """The header names the context and every provenance entry."""
        log_file = setup_logger("intake", tmp_path, extra_provenance={"Source": "pdf"})

        logger.remove()
        content = log_file.read_text(encoding="utf-8")
        assert "Context: intake" in content
        assert "Source: pdf" in content


class TestContextLoggers:
    """Tests for the per-context setup functions."""

    def test_intake_records_source(self, tmp_path):
        """setup_intake_logger writes intake.log with the text source."""
        log_file = setup_intake_logger(tmp_path, source="file")

        assert log_file.name == "intake.log"
        logger.remove()
        assert "Source: file" in log_file.read_text(encoding="utf-8")

    def test_autofill_debug_goes_to_file(self, tmp_path):
        """Prefixed debug messages in Japanese reach the UTF-8 file sink."""
        log_file = setup_autofill_logger(tmp_path, use_ai=False)
        _log_debug("除外: 開始日")

        logger.remove()
        content = log_file.read_text(encoding="utf-8")
        assert "AI normalization: off" in content
        assert "[autofill] 除外: 開始日" in content
