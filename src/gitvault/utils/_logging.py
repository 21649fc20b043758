"""Logging utilities for gitvault.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to a file or to stderr. Each logger is
self-contained and does not modify global structlog configuration.
"""

import atexit
import functools
import logging
import sys
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TextIO, cast

import structlog

from gitvault.config import LoggingConfig  # noqa: TC001 - Used at runtime in signature

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


@functools.cache
def _open_log_file(path: Path) -> TextIO:
    """Open a log file for appending, once per resolved path per process."""
    path.parent.mkdir(parents=True, exist_ok=True)
    stream = path.open("a", encoding="utf-8")
    atexit.register(stream.close)
    return stream


def _log_level_from_string(level: str, *, respect_env: bool = True) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, GITVAULT_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("GITVAULT_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def create_logger(
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger.

    The level can be forced to DEBUG with the GITVAULT_DEBUG environment
    variable.

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to the log file, opened in append mode and shared by
            every logger writing to it. Logs go to
            stderr when empty.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = _log_level_from_string(level)

    if log_file:
        stream = _open_log_file(Path(log_file).resolve())
        logger_factory = structlog.WriteLoggerFactory(file=stream)
    else:
        logger_factory = structlog.WriteLoggerFactory(file=sys.stderr)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


def create_logger_from_config(config: LoggingConfig) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger from the logging configuration section.

    Args:
        config: The logging configuration.

    Returns:
        A FilteringBoundLogger honoring the configured level, format and file.
    """
    return create_logger(
        level=config.level.value,
        log_format=cast("LogFormatType", config.format.value),
        log_file=config.file,
    )
