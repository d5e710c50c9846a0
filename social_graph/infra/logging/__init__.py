"""Logging infrastructure.

Structured logging on top of the standard library:
- JSONL format for log aggregation
- Automatic context injection (request_id, ...) via contextvars
- Lazy evaluation for expensive debug messages

Basic usage:
    import logging

    from social_graph.infra.logging import set_log_context

    logger = logging.getLogger(__name__)
    set_log_context(request_id="abc-123")
    logger.info("Processing request")  # record includes request_id
"""

from social_graph.infra.logging.config import configure_logging, setup_logging
from social_graph.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from social_graph.infra.logging.formatters import JSONFormatter
from social_graph.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
]
