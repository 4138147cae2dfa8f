"""@result decorator for catching Propagate exceptions."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

import wrapt

from klaw_flow.propagate import Propagate

__all__ = ['result']


def result[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Decorator that catches Propagate exceptions for .bail() support.

    When a function decorated with @result calls .bail() on an Err or on
    Nothing, the Propagate exception is caught and the carried container is
    returned. This gives Rust's ? operator semantics outside generator
    sequences.

    Automatically detects async functions and handles them appropriately.

    Args:
        func: The function to wrap. Must return an Option or Result.

    Returns:
        A wrapped function that returns the bailed container on failure.

    Example:
        ```python
        @result
        def process(x: int) -> Result[int, str]:
            value = get_value(x).bail()  # Returns Err early if get_value fails
            return Ok(value * 2)

        @result
        async def async_process(x: int) -> Result[int, str]:
            value = (await fetch(x)).bail()
            return Ok(value * 2)
        ```
    """
    if inspect.iscoroutinefunction(func):

        @wrapt.decorator
        async def async_wrapper(
            wrapped: Callable[P, Awaitable[Any]],
            instance: Any,
            args: tuple[Any, ...],
            kwargs: dict[str, Any],
        ) -> Any:
            try:
                return await wrapped(*args, **kwargs)
            except Propagate as p:
                return p.value

        return async_wrapper(func)  # type: ignore[return-value]

    @wrapt.decorator
    def sync_wrapper(
        wrapped: Callable[P, Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        try:
            return wrapped(*args, **kwargs)
        except Propagate as p:
            return p.value

    return sync_wrapper(func)  # type: ignore[return-value]
