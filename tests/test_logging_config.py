"""Tests for hanoi_tutor/core/logging_config.py - logging setup."""

import logging

from hanoi_tutor.core.logging_config import (
    COMPACT_FORMAT,
    DEFAULT_FORMAT,
    configure_third_party_loggers,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Test setup_logging function."""

    def test_returns_named_logger(self):
        logger = setup_logging("hanoi_test_1")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "hanoi_test_1"

    def test_level_default_and_string(self):
        assert setup_logging("hanoi_test_2").level == logging.INFO
        assert setup_logging("hanoi_test_3", level="warning").level == logging.WARNING
        assert setup_logging("hanoi_test_4", level=logging.DEBUG).level == logging.DEBUG

    def test_idempotent(self):
        """Calling setup_logging twice should not add duplicate handlers."""
        logger1 = setup_logging("hanoi_test_5")
        count = len(logger1.handlers)
        logger2 = setup_logging("hanoi_test_5")
        assert logger1 is logger2
        assert len(logger2.handlers) == count

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "game.log"
        logger = setup_logging("hanoi_test_6", log_file=log_file, console=False)
        logger.info("disk moved")
        for handler in logger.handlers:
            handler.flush()
        assert "disk moved" in log_file.read_text()
        setup_logging("hanoi_test_6", log_file=log_file, console=False)
        assert len([h for h in logger.handlers if isinstance(h, logging.FileHandler)]) == 1

    def test_propagate_flag(self):
        assert setup_logging("hanoi_test_8").propagate is False
        assert setup_logging("hanoi_test_9", propagate=True).propagate is True

    def test_compact_format(self):
        logger = setup_logging("hanoi_test_11", format_style="compact")
        assert logger.handlers[0].formatter._fmt == COMPACT_FORMAT

    def test_unknown_format_style_uses_default(self):
        logger = setup_logging("hanoi_test_10", format_style="nonexistent")
        assert logger.handlers[0].formatter._fmt == DEFAULT_FORMAT


class TestHelpers:
    def test_get_logger(self):
        assert get_logger("hanoi_get") is logging.getLogger("hanoi_get")

    def test_third_party_quieting(self):
        logging.getLogger("asyncio").setLevel(logging.INFO)
        configure_third_party_loggers(quiet=False)
        assert logging.getLogger("asyncio").level == logging.INFO
        configure_third_party_loggers(quiet=True)
        assert logging.getLogger("asyncio").level == logging.WARNING


def test_format_constants():
    for field in ("%(asctime)s", "%(name)s", "%(levelname)s", "%(message)s"):
        assert field in DEFAULT_FORMAT
    assert len(COMPACT_FORMAT) < len(DEFAULT_FORMAT)
