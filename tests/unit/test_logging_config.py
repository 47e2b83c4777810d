"""
Unit tests for logging setup.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from src.utils.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestSetupLogging:

    def test_console_only(self):
        assert setup_logging(log_level="WARNING") is None
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].level == logging.WARNING

    def test_file_logging(self, tmp_path):
        log_path = setup_logging(log_level="DEBUG", log_dir=tmp_path)

        assert log_path is not None
        assert log_path.parent == tmp_path
        assert log_path.name.startswith("vocab_exercises_")
        assert any(isinstance(h, RotatingFileHandler) for h in logging.getLogger().handlers)

        logging.getLogger("src.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello" in log_path.read_text(encoding="utf-8")

    def test_unknown_level_defaults_to_info(self):
        setup_logging(log_level="chatty")
        assert logging.getLogger().handlers[0].level == logging.INFO
