"""
Structured logging for ts_class_to_schema.

Log events go to stderr so that generated code written to stdout stays clean.

Configuration via environment:
- TS_CLASS_TO_SCHEMA_LOG_LEVEL: debug/info/warning/error (overridden by the argument)
- TS_CLASS_TO_SCHEMA_LOG_FORMAT: console/json
"""

import logging
import os
import sys

import structlog

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        level: Minimum level name, "warning" when unset
        json_output: Render events as JSON lines instead of console output
    """
    if level is None:
        level = os.environ.get("TS_CLASS_TO_SCHEMA_LOG_LEVEL", "warning")
    if json_output is None:
        json_output = os.environ.get("TS_CLASS_TO_SCHEMA_LOG_FORMAT", "console") == "json"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=LEVELS.get(level.lower(), logging.WARNING),
        force=True,
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        renderer = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
