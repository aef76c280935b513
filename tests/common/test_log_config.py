"""Tests for src/common/log_config.py"""

import logging
import sys

from src.common.log_config import setup_logging


class TestSetupLogging:
    def teardown_method(self):
        """Reset loggers between tests."""
        logger = logging.getLogger("src")
        logger.handlers.clear()
        logger.setLevel(logging.WARNING)
        logging.getLogger("urllib3").setLevel(logging.NOTSET)

    def test_default_level_is_info(self):
        setup_logging()
        assert logging.getLogger("src").level == logging.INFO

    def test_verbose_sets_debug(self):
        setup_logging(verbose=True)
        assert logging.getLogger("src").level == logging.DEBUG

    def test_quiet_sets_warning(self):
        setup_logging(quiet=True)
        assert logging.getLogger("src").level == logging.WARNING

    def test_handler_outputs_to_stderr(self):
        setup_logging()
        logger = logging.getLogger("src")
        assert len(logger.handlers) == 1
        assert logger.handlers[0].stream is sys.stderr

    def test_repeated_calls_keep_one_handler(self):
        setup_logging()
        setup_logging(verbose=True)
        assert len(logging.getLogger("src").handlers) == 1

    def test_urllib3_quieted_unless_verbose(self):
        setup_logging()
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_child_loggers_propagate(self):
        setup_logging()
        child = logging.getLogger("src.pipeline.updater")
        assert child.getEffectiveLevel() == logging.INFO
