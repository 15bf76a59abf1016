"""Structured logging configuration using structlog.

Library modules call get_logger(__name__); the CLI calls setup_logging()
once. Output meant for the user is printed by the CLI, not logged.
"""

import logging
import sys

import structlog


def setup_logging(json_output: bool = False, log_level: str = "WARNING") -> None:
    """Configure structlog with a console or JSON renderer.

    Args:
        json_output: If True, render JSON lines. Otherwise human-readable console output.
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # Logs go to stderr so that stdout stays clean for command output
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger bound with the module name."""
    return structlog.get_logger(name)
