"""
Logging configuration for the fly directory index.

Provides environment-aware logging that:
- Uses stderr exclusively so stdout stays clean for the shell wrapper
- Outputs JSON lines when FLY_LOG_FORMAT=json
- Supports an optional rotating log file
- Includes custom TRACE level for per-directory walk tracing
"""

import sys
import logging
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Any

# Define TRACE level (lower number = more detailed)
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# Add a trace method to the logger
def trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


def add_trace_to_logger():
    """Ensure trace method is available on all logger instances"""
    if not hasattr(logging.Logger, 'trace'):
        logging.Logger.trace = trace


class JsonFormatter(logging.Formatter):
    """JSON lines formatter for machine-readable logs"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'component': record.name,
            'message': record.getMessage(),
            'pid': os.getpid(),
        }

        # Context fields passed through log_with_context()
        if hasattr(record, 'extra'):
            log_data.update(record.extra)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def _resolve_level(level_str: str) -> int:
    if level_str.upper() == 'TRACE':
        return TRACE_LEVEL
    return getattr(logging, level_str.upper(), logging.INFO)


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    default_level: str = 'INFO',
    enable_rotation: bool = True,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
) -> None:
    """
    Configure logging based on environment.

    Args:
        log_level: Override log level (defaults to FLY_LOG_LEVEL, then LOG_LEVEL env vars)
        log_file: Optional log file (defaults to FLY_LOG_FILE env var)
        default_level: Level used when neither argument nor environment sets one
        enable_rotation: Enable log rotation for file handler
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """
    add_trace_to_logger()
    # FLY_LOG_LEVEL takes precedence over LOG_LEVEL
    level_str = (
        log_level
        or os.environ.get('FLY_LOG_LEVEL')
        or os.environ.get('LOG_LEVEL')
        or default_level
    )
    level = _resolve_level(level_str)

    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers = []

    use_json = os.environ.get('FLY_LOG_FORMAT', '').lower() == 'json'

    console_handler = logging.StreamHandler(sys.stderr)
    if use_json:
        console_handler.setFormatter(JsonFormatter())
    else:
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    log_file = log_file or os.environ.get('FLY_LOG_FILE')
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if enable_rotation:
            file_handler = RotatingFileHandler(
                str(log_path),
                maxBytes=max_bytes,
                backupCount=backup_count
            )
        else:
            file_handler = logging.FileHandler(str(log_path))

        file_handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(DEFAULT_FORMAT))
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)

    logger = logging.getLogger('fly')
    logger.debug(f"Logging configured - Level: {level_str.upper()}, file: {log_file or '-'}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    add_trace_to_logger()
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (e.g., logging.INFO)
        message: Log message
        **context: Additional fields to include in structured logs
    """
    extra = {'extra': context} if context else {}
    logger.log(level, message, extra=extra)
