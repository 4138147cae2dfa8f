"""@safe and @safe_async: decorator forms of Result.try_catch."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import wrapt

from klaw_flow.propagate import Propagate
from klaw_flow.result import Err, Ok, Result

__all__ = ['safe', 'safe_async']


def safe[**P, T](
    func: Callable[P, T] | None = None,
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
    on_error: Callable[[Any], Any] | None = None,
) -> Any:
    """Decorator that catches exceptions and returns Err.

    Wraps a function so that it returns Ok(value) on success and
    Err(exception), or Err(on_error(exception)), if one is raised.

    Can be used with or without arguments:
        @safe
        def risky(): ...

        @safe(exceptions=(ValueError, TypeError))
        def specific(): ...

    Args:
        func: The function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to catch. Defaults to (Exception,).
            The short-circuit signal raised by bail() is never caught.
        on_error: Maps the caught exception to the Err payload.

    Returns:
        A wrapped function that returns Result[T, E] instead of T.

    Example:
        ```python
        @safe
        def divide(a: int, b: int) -> float:
            return a / b

        divide(10, 2)  # Ok(5.0)
        divide(10, 0)  # Err(ZeroDivisionError('division by zero'))
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        try:
            return Ok(wrapped(*args, **kwargs))
        except Propagate:
            raise
        except catch as e:
            return Err(e if on_error is None else on_error(e))

    if func is not None:
        return wrapper(func)
    return wrapper


def safe_async[**P, T](
    func: Callable[P, Awaitable[T]] | None = None,
    *,
    exceptions: tuple[type[BaseException], ...] | None = None,
    on_error: Callable[[Any], Any] | None = None,
) -> Any:
    """Async decorator that catches exceptions and returns Err.

    Can be used with or without arguments, like @safe.

    Example:
        ```python
        @safe_async(exceptions=(TimeoutError,))
        async def fetch(url: str) -> str:
            return await http_get(url)
        ```
    """
    catch = exceptions if exceptions is not None else (Exception,)

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, Awaitable[T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        try:
            return Ok(await wrapped(*args, **kwargs))
        except Propagate:
            raise
        except catch as e:
            return Err(e if on_error is None else on_error(e))

    if func is not None:
        return wrapper(func)
    return wrapper
