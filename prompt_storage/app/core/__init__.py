"""
Core package containing application configuration and utilities.
"""

from .config import settings, MAX_CONNECTIONS  # noqa
from .logger import get_logger, setup_logging  # noqa

__all__ = [
    "settings",
    "MAX_CONNECTIONS",
    "get_logger",
    "setup_logging",
]
