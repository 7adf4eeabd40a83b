"""
Tests for observability — logging setup.
"""

import logging

import pytest

from pkgtarget.core.observability.logging_config import (
    LOG_LEVEL_ENV,
    _parse_level,
    level_from_flags,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLevelFromFlags:
    def test_debug_wins(self):
        assert level_from_flags(debug=True, verbose=True, quiet=True) == "DEBUG"

    def test_verbose(self):
        assert level_from_flags(verbose=True) == "INFO"

    def test_quiet(self):
        assert level_from_flags(quiet=True) == "ERROR"

    def test_env(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
        assert level_from_flags() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert level_from_flags() == "WARNING"


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("ERROR") == logging.ERROR

    def test_invalid_falls_back(self):
        assert _parse_level("LOUD") == logging.WARNING
        assert _parse_level(None) == logging.WARNING


class TestSetupLogging:
    def test_console_only(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_file_gets_more_verbose_level(self, tmp_path):
        log_file = tmp_path / "pkgtarget.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG

        logging.getLogger("pkgtarget.test").debug("probe degraded")
        for h in root.handlers:
            h.flush()
        assert "probe degraded" in log_file.read_text()

    def test_repeated_setup_replaces_handlers(self):
        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(logging.getLogger().handlers) == 1
