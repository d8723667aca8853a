"""Structured logging for Stagegraph.

This module provides structured logging using structlog, enabling:
- JSON-formatted logs for editor backends (machine-readable)
- Pretty console logs for development (human-readable)
- Automatic context binding (workflow_id)

Usage:
    from stagegraph.logging import configure_logging, get_logger

    configure_logging(json_format=True)

    logger = get_logger("my.module")
    logger.info("item_added", workflow_id="01H...", item_id="a1")
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

_configured = False


def configure_logging(
    json_format: bool = False,
    level: int = logging.INFO,
    logger_factory: Any = None,
) -> None:
    """Configure structured logging for Stagegraph.

    Call this once at application startup before any logging occurs.

    Args:
        json_format: If True, output JSON logs. If False, pretty console logs.
        level: Minimum log level (default: INFO)
        logger_factory: Custom logger factory (for testing)
    """
    global _configured

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory or structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str) -> Any:
    """Get a structured logger for the given name.

    Auto-configures with defaults if configure_logging() was never called.
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def workflow_logger(workflow_id: str) -> Any:
    """Get a logger pre-bound with workflow context.

    Args:
        workflow_id: The workflow ID

    Returns:
        Logger with workflow_id bound
    """
    return get_logger("stagegraph.workflow").bind(workflow_id=workflow_id)


def rewiring_logger(workflow_id: str) -> Any:
    """Get the connector engine logger pre-bound with workflow context."""
    return get_logger("stagegraph.rewiring").bind(workflow_id=workflow_id)
