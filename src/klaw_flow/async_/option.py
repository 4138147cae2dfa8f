"""AsyncOption: a chainable, awaitable Option."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Coroutine, Generator
from typing import TYPE_CHECKING, Any

from klaw_flow.option import Nothing, Option, Some

if TYPE_CHECKING:
    from klaw_flow.async_.result import AsyncResult

__all__ = ['AsyncOption']


class AsyncOption[T]:
    """Async-aware Option wrapper.

    Holds an Awaitable[Option[T]]. Sync combinators await the Option and apply
    the Option combinator; async combinators also await the mapper, which is
    never called on Nothing. Single-shot when wrapping a coroutine, like
    AsyncResult.

    Example:
        ```python
        async def find_email(user_id: int) -> Option[str]:
            ...

        email = await Some(7).flat_map_async(find_email).map(str.lower).unwrap_or('')
        ```
    """

    __slots__ = ('_awaitable', '_source')

    def __init__(
        self,
        awaitable: Awaitable[Option[T]],
        source: AsyncOption[Any] | AsyncResult[Any, Any] | None = None,
    ) -> None:
        self._awaitable = awaitable
        self._source = source

    def __await__(self) -> Generator[Any, Any, Option[T]]:
        return self._awaitable.__await__()

    def __repr__(self) -> str:
        return f'AsyncOption({self._awaitable!r})'

    def close(self) -> None:
        """Discard the chain without running it.

        Closes the wrapped coroutine and every coroutine the chain was built
        from. A no-op for steps that already ran.
        """
        if inspect.iscoroutine(self._awaitable):
            self._awaitable.close()
        if self._source is not None:
            self._source.close()

    @classmethod
    def from_option(cls, option: Option[T]) -> AsyncOption[T]:
        """Create an AsyncOption from a synchronous Option."""

        async def _option() -> Option[T]:
            return option

        return cls(_option())

    def _then[U](self, f: Callable[[Option[T]], Option[U]]) -> AsyncOption[U]:
        async def _applied() -> Option[U]:
            return f(await self._awaitable)

        return AsyncOption(_applied(), self)

    # --- Sync combinators ---

    def map[U](self, f: Callable[[T], U]) -> AsyncOption[U]:
        return self._then(lambda o: o.map(f))

    def flat_map[U](self, f: Callable[[T], Option[U]]) -> AsyncOption[U]:
        return self._then(lambda o: o.flat_map(f))

    and_then = flat_map

    def filter(self, predicate: Callable[[T], bool]) -> AsyncOption[T]:
        return self._then(lambda o: o.filter(predicate))

    def zip[U](self, f: Callable[[T], U]) -> AsyncOption[tuple[T, U]]:
        return self._then(lambda o: o.zip(f))

    def flat_zip[U](self, f: Callable[[T], Option[U]]) -> AsyncOption[tuple[T, U]]:
        return self._then(lambda o: o.flat_zip(f))

    def inner_map[U](self, f: Callable[[Any], U]) -> AsyncOption[Any]:
        return self._then(lambda o: o.inner_map(f))

    def tap(self, f: Callable[[T], object]) -> AsyncOption[T]:
        return self._then(lambda o: o.tap(f))

    def to_result[E](self, error: E) -> AsyncResult[T, E]:
        """Convert to an AsyncResult: Ok(value) for Some, Err(error) for Nothing."""
        from klaw_flow.async_.result import AsyncResult

        async def _converted() -> Any:
            return (await self._awaitable).to_result(error)

        return AsyncResult(_converted(), self)

    # --- Async combinators ---

    def map_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncOption[U]:
        """Apply an async function to the Some value.

        Example:
            ```python
            async def double(x: int) -> int:
                return x * 2

            async def example():
                assert await Some(5).map_async(double) == Some(10)
            ```
        """

        async def _mapped() -> Option[U]:
            option = await self._awaitable
            if isinstance(option, Some):
                return Some(await f(option.value))
            return Nothing

        return AsyncOption(_mapped(), self)

    def flat_map_async[U](self, f: Callable[[T], Awaitable[Option[U]]]) -> AsyncOption[U]:
        async def _chained() -> Option[U]:
            option = await self._awaitable
            if isinstance(option, Some):
                return await f(option.value)
            return Nothing

        return AsyncOption(_chained(), self)

    and_then_async = flat_map_async

    def filter_async(self, predicate: Callable[[T], Awaitable[bool]]) -> AsyncOption[T]:
        async def _filtered() -> Option[T]:
            option = await self._awaitable
            if isinstance(option, Some) and await predicate(option.value):
                return option
            return Nothing

        return AsyncOption(_filtered(), self)

    def zip_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncOption[tuple[T, U]]:
        async def _zipped() -> Option[tuple[T, U]]:
            option = await self._awaitable
            if isinstance(option, Some):
                return Some((option.value, await f(option.value)))
            return Nothing

        return AsyncOption(_zipped(), self)

    def flat_zip_async[U](self, f: Callable[[T], Awaitable[Option[U]]]) -> AsyncOption[tuple[T, U]]:
        async def _zipped() -> Option[tuple[T, U]]:
            option = await self._awaitable
            if isinstance(option, Some):
                other = await f(option.value)
                if isinstance(other, Some):
                    return Some((option.value, other.value))
            return Nothing

        return AsyncOption(_zipped(), self)

    def tap_async(self, f: Callable[[T], Awaitable[object]]) -> AsyncOption[T]:
        async def _tapped() -> Option[T]:
            option = await self._awaitable
            if isinstance(option, Some):
                await f(option.value)
            return option

        return AsyncOption(_tapped(), self)

    # --- Terminal operations ---

    async def unwrap(self) -> T:
        return (await self._awaitable).unwrap()

    async def unwrap_or(self, default: T) -> T:
        return (await self._awaitable).unwrap_or(default)

    async def unwrap_or_else(self, f: Callable[[], T]) -> T:
        return (await self._awaitable).unwrap_or_else(f)

    async def safe_unwrap(self) -> T | None:
        return (await self._awaitable).safe_unwrap()

    async def match[U](self, *, some: Callable[[T], U], none: Callable[[], U]) -> U:
        return (await self._awaitable).match(some=some, none=none)

    async def match_async[U](
        self,
        *,
        some: Callable[[T], Awaitable[U]],
        none: Callable[[], Awaitable[U]],
    ) -> U:
        """Await the Option, then await the matching handler."""
        option = await self._awaitable
        if isinstance(option, Some):
            return await some(option.value)
        return await none()

    def fold_async[U](
        self,
        on_some: Callable[[T], Awaitable[U]],
        on_none: Callable[[], Awaitable[U]],
    ) -> Coroutine[Any, Any, U]:
        """Positional form of ``match_async``."""
        return self.match_async(some=on_some, none=on_none)
