"""Tests for logging setup."""

import logging

import pytest

from friday_assistant.config import get_settings
from friday_assistant.logging import NOISY_LOGGERS, ROOT_LOGGER, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def clean_loggers():
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    noisy = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    logger.handlers.clear()
    get_settings.cache_clear()
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    for name, noisy_level in noisy.items():
        logging.getLogger(name).setLevel(noisy_level)
    get_settings.cache_clear()


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setenv("FRIDAY_LOG_LEVEL", "ERROR")
    assert resolve_level("debug") == logging.DEBUG


def test_level_from_settings(monkeypatch):
    monkeypatch.setenv("FRIDAY_LOG_LEVEL", "INFO")
    assert resolve_level() == logging.INFO


def test_invalid_level_falls_back_to_warning(capsys):
    assert resolve_level("LOUD") == logging.WARNING
    assert "LOUD" in capsys.readouterr().err


def test_setup_is_idempotent():
    logger = setup_logging("INFO")
    setup_logging("ERROR")

    assert len(logger.handlers) == 1
    assert logger.level == logging.ERROR
    assert logger.handlers[0].level == logging.ERROR


def test_sdk_loggers_quiet_unless_debugging():
    setup_logging("INFO")
    assert logging.getLogger("httpx").level == logging.WARNING

    setup_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.DEBUG
