"""Utility functions package."""

from tradejournal.utils.logger import setup_logging, get_logger, app_logger
from tradejournal.utils.locks import KeyedLock

__all__ = [
    "setup_logging",
    "get_logger",
    "app_logger",
    "KeyedLock",
]
