"""CLI utilities for running async operations and formatting output."""

from social_graph.cli.utils.async_runner import coro, run_async
from social_graph.cli.utils.formatters import error, info, success, warning

__all__ = [
    "coro",
    "error",
    "info",
    "run_async",
    "success",
    "warning",
]
