"""Logging for the assistant.

All package loggers hang off the ``friday_assistant`` logger, which writes
to stderr so it never mixes with the conversation printed on stdout.
"""

import logging
import sys

from .config import get_settings

ROOT_LOGGER = "friday_assistant"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# sdk and transport loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "googleapiclient", "openai", "anthropic")


def resolve_level(level: str | None = None) -> int:
    """Numeric level for ``level``, else the FRIDAY_LOG_LEVEL setting."""
    name = (level or get_settings().log_level).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        print(f"Warning: Invalid log level '{name}', using WARNING", file=sys.stderr)
        return logging.WARNING
    return numeric


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the package logger; safe to call more than once.

    Third-party loggers are held at WARNING unless ``level`` is DEBUG.
    """
    numeric = resolve_level(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(numeric)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(numeric if numeric <= logging.DEBUG else logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
