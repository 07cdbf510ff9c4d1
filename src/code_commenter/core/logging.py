"""Structured logging for code-commenter.

Events are JSON lines written to stderr, or appended to a log file, so they
never mix with the previews and summaries the CLI prints on stdout. Core
functions take an optional ``logger`` argument and stay silent by default
(see ``get_null_logger``); the CLI, the MCP tools and the batch processor
use named loggers from ``get_logger``.
"""
import sys
from typing import Any, Dict, List, Optional, TextIO

import structlog

from code_commenter.constants import LoggingDefaults

_LEVEL_NUMBERS: Dict[str, int] = {name: (index + 1) * 10 for index, name in enumerate(LoggingDefaults.LEVELS)}


def _processors() -> List[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def _log_stream(log_file: Optional[str]) -> TextIO:
    if log_file is None:
        return sys.stderr
    return open(log_file, "a", encoding="utf-8")


def configure_logging(log_level: str = LoggingDefaults.DEFAULT_LEVEL, log_file: Optional[str] = None) -> None:
    """Configure JSON logging for the CLI and the MCP server.

    Unknown level names fall back to the default level.

    Args:
        log_level: One of LoggingDefaults.LEVELS (case-insensitive)
        log_file: Append events to this file instead of stderr
    """
    default = _LEVEL_NUMBERS[LoggingDefaults.DEFAULT_LEVEL]
    numeric_level = _LEVEL_NUMBERS.get(log_level.upper(), default)

    structlog.configure(
        processors=_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=_log_stream(log_file)),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a logger whose events carry ``logger=<name>``.

    Args:
        name: Component name ("cli", "processor", "tool.document_code", ...)
    """
    return structlog.get_logger().bind(logger=name)


def get_null_logger() -> Any:
    """Get a logger that silently discards every event.

    Returns:
        structlog logger bound to a ReturnLogger with no processors
    """
    return structlog.wrap_logger(structlog.ReturnLogger(), processors=[])
