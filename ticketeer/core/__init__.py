"""
Ticketeer - Core Package
========================

Configuration, logging, error types and persistence.

DESIGN:
    - get_config() returns the same Config instance
    - logger is a global TreeLogger instance
    - DatabaseManager is constructed once by the bot and injected
"""

from .config import Config, ConfigValidationError, get_config
from .logger import logger, TreeLogger
from .database import DatabaseManager

__all__ = [
    "Config",
    "ConfigValidationError",
    "get_config",
    "logger",
    "TreeLogger",
    "DatabaseManager",
]
