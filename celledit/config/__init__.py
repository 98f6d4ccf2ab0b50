"""
Configuration modules for the cell editor.
"""

from .settings import Settings, get_settings
from .logging_config import setup_logging, get_logger, LoggerMixin, OperationTimer

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "OperationTimer",
]
