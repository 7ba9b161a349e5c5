"""
Tests for the rate-limited logging helper.
"""
import logging
from unittest.mock import MagicMock, patch

from cachetools import TTLCache

from fundchain_sdk._rate_limited_log import rate_limited_log, reset_rate_limits


def _logger(name="fundchain.test"):
    logger = MagicMock()
    logger.name = name
    return logger


def test_repeated_message_is_suppressed():
    logger = _logger()

    assert rate_limited_log("Skipping log", level="debug", logger_instance=logger)
    assert not rate_limited_log("Skipping log", level="debug", logger_instance=logger)

    logger.debug.assert_called_once_with("Skipping log")


def test_level_and_logger_are_part_of_the_key():
    first, second = _logger("a"), _logger("b")

    assert rate_limited_log("message", level="warning", logger_instance=first)
    assert rate_limited_log("message", level="error", logger_instance=first)
    assert rate_limited_log("message", level="warning", logger_instance=second)


def test_reset_rate_limits():
    logger = _logger()
    rate_limited_log("again", logger_instance=logger)
    reset_rate_limits()

    assert rate_limited_log("again", logger_instance=logger)
    assert logger.warning.call_count == 2


def test_message_expires_with_ttl():
    timer = MagicMock(return_value=0)
    cache = TTLCache(maxsize=16, ttl=10, timer=timer)
    logger = _logger()

    with patch("fundchain_sdk._rate_limited_log._log_cache", cache):
        assert rate_limited_log("ttl", logger_instance=logger)
        timer.return_value = 5
        assert not rate_limited_log("ttl", logger_instance=logger)
        timer.return_value = 11
        assert rate_limited_log("ttl", logger_instance=logger)


def test_default_logger(caplog):
    with caplog.at_level(logging.WARNING, logger="fundchain_sdk._rate_limited_log"):
        rate_limited_log("module logger")
    assert "module logger" in caplog.text
