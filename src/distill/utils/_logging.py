"""Logging utilities for Distill.

This module provides a standalone structlog logger factory that writes
text-formatted or JSON-formatted logs to stderr. The logger is
self-contained and does not modify global structlog configuration, so
stdout stays reserved for the generated commit message.
"""

import logging
import sys
from os import getenv
from typing import TYPE_CHECKING, Literal, TextIO, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _log_level_from_string(level: str | None, *, respect_env: bool = True) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error). If None,
            DISTILL_LOG_LEVEL is consulted, then WARNING is used.
        respect_env: If True, DISTILL_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("DISTILL_DEBUG", None):
        return logging.DEBUG

    if level is None:
        level = getenv("DISTILL_LOG_LEVEL", "warning")

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.WARNING)


def _create_logger(
    stream: TextIO,
    *,
    log_level: int,
    log_format: LogFormatType = "text",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger writing to a stream.

    Args:
        stream: Text stream to write log lines to.
        log_level: Minimum level to emit.
        log_format: Output format, either "json" or "text".

    Returns:
        A configured FilteringBoundLogger instance.
    """
    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        # Add dict_tracebacks for structured exception logging in JSON
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(log_level)

    # Use wrap_logger for standalone logger creation (doesn't affect global config)
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.PrintLogger(file=stream),
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


def create_cli_logger(
    *,
    verbose: bool = False,
    level: str | None = None,
    log_format: LogFormatType | None = None,
    stream: TextIO | None = None,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger for the distill command.

    The log level is determined by (in order of precedence):
    1. The `verbose` flag (enables DEBUG level)
    2. DISTILL_DEBUG environment variable (if set, enables DEBUG level)
    3. The `level` parameter (if provided)
    4. DISTILL_LOG_LEVEL environment variable
    5. Default: WARNING

    The format comes from `log_format`, then DISTILL_LOG_FORMAT, then "text".

    Args:
        verbose: Force debug logging.
        level: Optional log level string (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        stream: Stream to write to. Defaults to sys.stderr.

    Returns:
        A FilteringBoundLogger instance configured for CLI logging.
    """
    effective_level = (
        logging.DEBUG if verbose else _log_level_from_string(level, respect_env=True)
    )

    if log_format is None:
        env_format = getenv("DISTILL_LOG_FORMAT", "text").strip().lower()
        log_format = "json" if env_format == "json" else "text"

    return _create_logger(
        stream if stream is not None else sys.stderr,
        log_level=effective_level,
        log_format=log_format,
    ).bind(command="distill")
