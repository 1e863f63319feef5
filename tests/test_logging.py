"""Tests for randwall.logging_setup."""

import logging

from randwall.logging_setup import LogObjects, get_logger, init_logger, is_debug


def test_init_logger_twice_keeps_handlers():
    before = list(LogObjects.handlers)
    init_logger()
    init_logger(force_debug=True)
    assert LogObjects.handlers == before
    assert is_debug()


def test_get_logger_does_not_duplicate_handlers():
    logger = get_logger("randwall.test_logging")
    count = len(logger.handlers)
    get_logger("randwall.test_logging")
    assert len(logger.handlers) == count
    assert logger.level == logging.DEBUG
