"""
Logging configuration for the cell editor.

Editor code logs through structlog with keyword context (column, row,
operation). `setup_logging` routes it into stdlib logging so that uvicorn
and the editor share handlers.
"""

import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.stdlib import LoggerFactory

from .settings import Settings, get_settings

# Global logger cache
_loggers = {}

_CONSOLE_DEBUG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = settings or get_settings()
    level = getattr(logging, settings.LOG_LEVEL)

    structlog.configure(
        processors=_shared_processors() + [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=True) if settings.DEBUG
            else structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(settings, level))
    if settings.LOG_FILE:
        root_logger.addHandler(_file_handler(settings, level))

    _configure_specific_loggers(settings)

    get_logger(__name__).info(
        "Logging configured",
        level=settings.LOG_LEVEL,
        debug_mode=settings.DEBUG,
        log_file=settings.LOG_FILE,
    )


def _shared_processors() -> List:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]


def _console_handler(settings: Settings, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if settings.DEBUG:
        handler.setFormatter(logging.Formatter(_CONSOLE_DEBUG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    else:
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    return handler


def _file_handler(settings: Settings, level: int) -> logging.Handler:
    log_file_path = Path(settings.LOG_FILE)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    if settings.LOG_ROTATION:
        handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=_parse_size(settings.LOG_MAX_SIZE),
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding='utf-8',
        )
    else:
        handler = logging.FileHandler(log_file_path, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    return handler


def _configure_specific_loggers(settings: Settings) -> None:
    # Editor-state API
    logging.getLogger("uvicorn.access").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)

    # Saves and formula-error fetches log at debug
    logging.getLogger("celledit.editor").setLevel(
        logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL))


def _parse_size(size_str: str) -> int:
    """Parse size string (e.g., '10MB') to bytes. Falls back to 10MB."""
    size_str = size_str.upper().strip()
    for suffix, multiplier in (('KB', 1024), ('MB', 1024**2), ('GB', 1024**3), ('B', 1)):
        if size_str.endswith(suffix):
            size_str = size_str[:-len(suffix)]
            try:
                return int(float(size_str) * multiplier)
            except ValueError:
                break
    try:
        return int(size_str)
    except ValueError:
        return 10 * 1024 * 1024


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    if name not in _loggers:
        _loggers[name] = structlog.get_logger(name)
    return _loggers[name]


class LoggerMixin:
    """Adds a `logger` named after the class's module and name."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__module__ + "." + self.__class__.__name__)


class OperationTimer:
    """Context manager logging how long an operation took, and whether it failed."""

    def __init__(self, operation_name: str, logger: Optional[structlog.stdlib.BoundLogger] = None,
                 **context):
        self.operation_name = operation_name
        self.logger = logger or get_logger(__name__)
        self.context = context
        self.start_time: Optional[float] = None

    def __enter__(self) -> "OperationTimer":
        self.start_time = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        duration = time.monotonic() - self.start_time
        if exc_type is not None:
            self.logger.warning("Operation failed", operation=self.operation_name,
                                duration=duration, error=str(exc_val), **self.context)
        else:
            self.logger.debug("Operation completed", operation=self.operation_name,
                              duration=duration, **self.context)


def configure_test_logging() -> None:
    """Plain-text debug logging for tests."""
    logging.basicConfig(
        level=logging.DEBUG,
        format=_CONSOLE_DEBUG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    structlog.configure(
        processors=_shared_processors() + [structlog.dev.ConsoleRenderer(colors=False)],
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    # Reduce noise from external libraries during testing
    logging.getLogger("uvicorn").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.ERROR)
