"""
Logging configuration for holidaybook.

JSON lines in Lambda so CloudWatch Insights can query the extra fields,
plain text with colors on a terminal for the CLI scripts.

Usage:
    from holidaybook.logging_config import setup_logging, get_logger

    setup_logging()  # Auto-detects Lambda vs CLI
    logger = get_logger(__name__)

    logger.info("Resolved date", extra={'date': '20240101'})
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class JsonFormatter(logging.Formatter):
    """
    Format log records as JSON for CloudWatch Insights queries.

    Non-ASCII text (holiday names, categories) is written as-is rather than
    as \\u escapes so the log lines stay readable.

    Output format:
    {
        "timestamp": "2024-01-15T10:30:00.000+00:00",
        "level": "INFO",
        "logger": "holidaybook.core.lookup",
        "message": "Loaded dataset from cache",
        "cache_key": "holiday-dataset.json",
        ...
    }
    """

    # LogRecord attributes that are not user supplied extras
    EXCLUDE_FIELDS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
        'taskName', 'message'
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_obj: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(timespec='milliseconds'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Extras passed via extra={...}; unserializable values are stringified
        for key, value in record.__dict__.items():
            if key not in self.EXCLUDE_FIELDS and key not in log_obj:
                try:
                    json.dumps(value)
                    log_obj[key] = value
                except (TypeError, ValueError):
                    log_obj[key] = str(value)

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    """
    Human-readable formatter for CLI output.

    Output format:
    2024-01-15 10:30:00 INFO  [core.lookup] Loaded dataset from cache (cache_key=holiday-dataset.json)

    Logger names lose their "holidaybook." prefix. Colors are only used
    when stderr is a terminal.
    """

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record for human readability."""
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')

        level = record.levelname.ljust(5)
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelname, '')
            level = f"{color}{level}{self.RESET}"

        logger_name = record.name
        if logger_name.startswith('holidaybook.'):
            logger_name = logger_name[len('holidaybook.'):]

        extras = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in JsonFormatter.EXCLUDE_FIELDS
        ]
        extra_str = f" ({', '.join(extras)})" if extras else ""

        output = f"{timestamp} {level} [{logger_name}] {record.getMessage()}{extra_str}"

        if record.exc_info:
            output += f"\n{self.formatException(record.exc_info)}"

        return output


def is_lambda_environment() -> bool:
    """Check if running in AWS Lambda (the runtime sets AWS_LAMBDA_FUNCTION_NAME)."""
    return bool(os.getenv('AWS_LAMBDA_FUNCTION_NAME'))


def setup_logging(
    json_format: Optional[bool] = None,
    level: Optional[str] = None,
    logger_name: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        json_format: Use JSON format (True) or human-readable (False).
                    If None, auto-detects based on AWS_LAMBDA_FUNCTION_NAME.
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to LOG_LEVEL env var or INFO.
        logger_name: Specific logger to configure. If None, configures root logger.

    Example:
        # Auto-detect (JSON in Lambda, human-readable in CLI)
        setup_logging()

        # Lambda entry points force JSON
        setup_logging(json_format=True)

        # Debug a single package
        setup_logging(level='DEBUG', logger_name='holidaybook')
    """
    if json_format is None:
        json_format = is_lambda_environment()

    if level is None:
        level = os.getenv('LOG_LEVEL', 'INFO').upper()

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level, logging.INFO))

    # Lambda reuses the interpreter, so handlers would pile up otherwise
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(getattr(logging, level, logging.INFO))
    handler.setFormatter(JsonFormatter() if json_format else HumanFormatter())
    logger.addHandler(handler)

    if logger_name:
        logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name, typically __name__

    Returns:
        Logger that inherits the handler installed by setup_logging
    """
    return logging.getLogger(name)
