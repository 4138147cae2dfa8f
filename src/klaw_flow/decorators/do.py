"""@do and @do_async: generator functions as Flow sequences."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Coroutine, Generator
from typing import Any

import wrapt

from klaw_flow.engine import FLOW, run, run_async
from klaw_flow.result import Result

__all__ = ['do', 'do_async']


def do[**P, T](
    func: Callable[P, Generator[Any, Any, T]],
) -> Callable[P, Result[T, Any]]:
    """Decorator for generator-based do-notation over Option and Result.

    Each call runs the generator with ``Flow.gen`` semantics: yielded Some/Ok
    values are unwrapped, the first Nothing, Err or FlowError ends the call
    with an Err, and the return value is wrapped in Ok.

    Args:
        func: A generator function yielding Options and Results.

    Returns:
        A function with the same signature returning Result[T, Any].

    Example:
        ```python
        @do
        def checkout(cart_id: int):
            cart = yield Option.from_nullable(carts.get(cart_id))
            total = yield price(cart)  # Result
            return total

        checkout(1)  # Ok(...) or Err(...)
        ```
    """

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, Generator[Any, Any, T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        return run(FLOW, wrapped(*args, **kwargs))

    return wrapper(func)  # type: ignore[return-value]


def do_async[**P](
    func: Callable[P, AsyncGenerator[Any, Any]],
) -> Callable[P, Coroutine[Any, Any, Result[Any, Any]]]:
    """Async decorator for do-notation with ``Flow.async_gen`` semantics.

    Note: Async generators cannot have a return value in Python, so the
    payload of the last yielded step is used as the final result.

    Example:
        ```python
        @do_async
        async def compute():
            x = yield fetch_x()  # awaited by the engine
            y = yield fetch_y()
            yield Ok(x + y)  # final result
        ```
    """

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, AsyncGenerator[Any, Any]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[Any, Any]:
        return await run_async(FLOW, wrapped(*args, **kwargs))

    return wrapper(func)  # type: ignore[return-value]
