"""Logging utilities for minigit.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to a file or to stderr. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from minigit.config import LoggingConfig

LogFormatType = Literal["json", "text"]

ACCESS_LOGGER_NAME = "minigit.access"


def _log_level_from_string(level: str | None) -> int:
    """Convert a log level string to a logging level integer.

    ``MINIGIT_DEBUG`` forces DEBUG. Without an explicit level,
    ``MINIGIT_LOG_LEVEL`` is consulted, defaulting to INFO.

    Args:
        level: Log level string (debug, info, warning, error), or None.

    Returns:
        The logging level as an integer.
    """
    if getenv("MINIGIT_DEBUG", None):
        return logging.DEBUG

    if level is None:
        level = getenv("MINIGIT_LOG_LEVEL", "info")

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def _create_logger(
    log_file_path: str = "",
    *,
    log_level: int = logging.INFO,
    log_format: LogFormatType = "json",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> "FilteringBoundLogger":
    """Create a standalone structlog logger.

    Args:
        log_file_path: Path to the log file, opened in append mode. Empty
            writes to stderr.
        log_level: Minimum level that is emitted.
        log_format: Output format, either "json" or "text".
        max_bytes: Maximum size in bytes before rotation. Must be set with
            backup_count for rotation to be enabled.
        backup_count: Number of rotated log files to keep.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    raw_logger: object
    if log_file_path:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if max_bytes is not None and backup_count is not None:
            # One handler per file, so loggers sharing a file rotate it once.
            stdlib_logger = logging.getLogger(f"minigit.file.{log_path.resolve()}")
            stdlib_logger.propagate = False
            stdlib_logger.setLevel(logging.DEBUG)

            if not stdlib_logger.handlers:
                handler = RotatingFileHandler(
                    log_path, maxBytes=max_bytes, backupCount=backup_count
                )
                handler.setFormatter(logging.Formatter("%(message)s"))
                stdlib_logger.addHandler(handler)
            raw_logger = stdlib_logger
        else:
            raw_logger = structlog.WriteLoggerFactory(file=log_path.open("a"))()
    else:
        raw_logger = structlog.WriteLoggerFactory(file=sys.stderr)()

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
        ),
    )


def create_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    log_file: str = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> "FilteringBoundLogger":
    """Create a standalone minigit logger.

    The log level is determined by (in order of precedence):
    1. MINIGIT_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. MINIGIT_LOG_LEVEL environment variable
    4. Default: INFO

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to log file. Empty writes to stderr.
        max_bytes: Maximum size in bytes before rotation.
        backup_count: Number of rotated log files to keep.

    Returns:
        A FilteringBoundLogger instance.
    """
    return _create_logger(
        log_file,
        log_level=_log_level_from_string(level),
        log_format=log_format,
        max_bytes=max_bytes,
        backup_count=backup_count,
    )


def create_server_logger(config: "LoggingConfig") -> "FilteringBoundLogger":
    """Create the application logger from the logging configuration."""
    return create_logger(
        level=str(config.level),
        log_format=cast("LogFormatType", str(config.format)),
        log_file=config.file,
        max_bytes=config.max_bytes,
        backup_count=config.backup_count,
    )


def create_access_logger(config: "LoggingConfig") -> "FilteringBoundLogger":
    """Create the git access logger.

    Writes to ``access_file`` when configured, otherwise to the same sink as
    the application logger. Every entry carries ``logger="minigit.access"``.

    Args:
        config: The logging configuration section.

    Returns:
        A FilteringBoundLogger bound to the access logger name.
    """
    logger = create_logger(
        level=str(config.level),
        log_format=cast("LogFormatType", str(config.format)),
        log_file=config.access_file or config.file,
        max_bytes=config.max_bytes,
        backup_count=config.backup_count,
    )
    return logger.bind(logger=ACCESS_LOGGER_NAME)
