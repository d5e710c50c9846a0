"""Utilities for running async operations in CLI commands."""

import asyncio
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any


def run_async[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine to completion in a fresh event loop.

    Args:
        coro: The coroutine to run

    Returns:
        The result of the coroutine
    """
    return asyncio.run(coro)


def coro[T](f: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., T]:
    """Decorator that makes an async function synchronous for Click.

    Usage:
        @click.command()
        @coro
        async def my_command():
            await some_async_operation()
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        return run_async(f(*args, **kwargs))

    return wrapper


__all__ = ["coro", "run_async"]
