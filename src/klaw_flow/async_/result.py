"""AsyncResult: a chainable, awaitable Result.

AsyncResult wraps an Awaitable[Result[T, E]]. Every combinator returns a new
AsyncResult, so a chain of sync and async steps only runs when awaited.

Example:
    ```python
    async def fetch_user(id: int) -> Result[User, str]:
        ...

    result = await (
        Ok(1)
        .flat_map_async(fetch_user)
        .map(lambda user: user.name)
        .tap_err_async(report)
    )
    ```
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Coroutine, Generator, Iterable
from typing import TYPE_CHECKING, Any

from klaw_flow.result import Err, Ok, Result

if TYPE_CHECKING:
    from klaw_flow.async_.option import AsyncOption

__all__ = ['AsyncResult']


class AsyncResult[T, E]:
    """Async-aware Result wrapper for composing async Result operations.

    Sync combinators are "await the wrapped Result, then apply the Result
    combinator"; async combinators await the mapper as well. Failure rules are
    the same as for Result: mappers never run on the wrong variant.

    Note:
        AsyncResult is single-shot when wrapping a coroutine object.
        Coroutines can only be awaited once; awaiting the same AsyncResult
        twice raises RuntimeError. Use from_result for reusable values, or wrap
        a Task/Future for multi-await scenarios.

    Attributes:
        _awaitable: The underlying awaitable that produces a Result.
        _source: The wrapper this one was chained from, if any.
    """

    __slots__ = ('_awaitable', '_source')

    def __init__(
        self,
        awaitable: Awaitable[Result[T, E]],
        source: AsyncResult[Any, Any] | AsyncOption[Any] | None = None,
    ) -> None:
        """Create an AsyncResult from an awaitable.

        Args:
            awaitable: An awaitable that produces a Result[T, E].
            source: The wrapper whose result the awaitable consumes. Closing
                this AsyncResult closes the source too.
        """
        self._awaitable = awaitable
        self._source = source

    def __await__(self) -> Generator[Any, Any, Result[T, E]]:
        """Support await syntax to get the underlying Result."""
        return self._awaitable.__await__()

    def __repr__(self) -> str:
        return f'AsyncResult({self._awaitable!r})'

    def close(self) -> None:
        """Close the wrapped coroutine chain without awaiting it.

        Used when an aggregation stops early, so never-awaited steps don't
        emit "coroutine was never awaited" warnings.
        """
        if inspect.iscoroutine(self._awaitable):
            self._awaitable.close()
        if self._source is not None:
            self._source.close()

    @classmethod
    def from_result(cls, result: Result[T, E]) -> AsyncResult[T, E]:
        """Create an AsyncResult from a synchronous Result."""

        async def _result() -> Result[T, E]:
            return result

        return cls(_result())

    @classmethod
    def from_ok(cls, value: T) -> AsyncResult[T, E]:
        """Create an AsyncResult containing Ok(value)."""
        return cls.from_result(Ok(value))

    @classmethod
    def from_err(cls, error: E) -> AsyncResult[T, E]:
        """Create an AsyncResult containing Err(error)."""
        return cls.from_result(Err(error))

    def _then[U, F](self, f: Callable[[Result[T, E]], Result[U, F]]) -> AsyncResult[U, F]:
        async def _applied() -> Result[U, F]:
            return f(await self._awaitable)

        return AsyncResult(_applied(), self)

    # --- Sync combinators ---

    def map[U](self, f: Callable[[T], U]) -> AsyncResult[U, E]:
        """Apply a sync function to the Ok value.

        Example:
            ```python
            async def example():
                result = await AsyncResult.from_ok(5).map(lambda x: x * 2)
                assert result == Ok(10)
            ```
        """
        return self._then(lambda r: r.map(f))

    def flat_map[U, F](self, f: Callable[[T], Result[U, F]]) -> AsyncResult[U, E | F]:
        """Chain with a sync function that returns a Result."""
        return self._then(lambda r: r.flat_map(f))

    and_then = flat_map

    def zip[U](self, f: Callable[[T], U]) -> AsyncResult[tuple[T, U], E]:
        return self._then(lambda r: r.zip(f))

    def flat_zip[U, F](self, f: Callable[[T], Result[U, F]]) -> AsyncResult[tuple[T, U], E | F]:
        return self._then(lambda r: r.flat_zip(f))

    def inner_map[U](self, f: Callable[[Any], U]) -> AsyncResult[Any, E]:
        return self._then(lambda r: r.inner_map(f))

    def map_err[F](self, f: Callable[[E], F]) -> AsyncResult[T, F]:
        """Apply a sync function to the Err value."""
        return self._then(lambda r: r.map_err(f))

    def zip_err[F](self, f: Callable[[T], Result[Any, F]]) -> AsyncResult[T, E | F]:
        return self._then(lambda r: r.zip_err(f))

    def map_both[U, F](self, f_ok: Callable[[T], U], f_err: Callable[[E], F]) -> AsyncResult[U, F]:
        return self._then(lambda r: r.map_both(f_ok, f_err))

    def validate(self, validators: Iterable[Callable[[T], Result[Any, E]]]) -> AsyncResult[T, Any]:
        """Run sync validators once the Result is available."""
        validators = list(validators)
        return self._then(lambda r: r.validate(validators))

    def or_else[F](self, f: Callable[[E], Result[T, F]]) -> AsyncResult[T, F]:
        """Recover from an Err with a sync function."""
        return self._then(lambda r: r.or_else(f))

    def tap(self, f: Callable[[T], object]) -> AsyncResult[T, E]:
        return self._then(lambda r: r.tap(f))

    def tap_err(self, f: Callable[[E], object]) -> AsyncResult[T, E]:
        return self._then(lambda r: r.tap_err(f))

    def flip(self) -> AsyncResult[E, T]:
        return self._then(lambda r: r.flip())

    def to_option(self) -> AsyncOption[T]:
        """Convert to an AsyncOption: Some(value) for Ok, Nothing for Err."""
        from klaw_flow.async_.option import AsyncOption

        async def _converted() -> Any:
            return (await self._awaitable).to_option()

        return AsyncOption(_converted(), self)

    # --- Async combinators ---

    def map_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncResult[U, E]:
        """Apply an async function to the Ok value.

        Example:
            ```python
            async def double(x: int) -> int:
                return x * 2

            async def example():
                result = await AsyncResult.from_ok(5).map_async(double)
                assert result == Ok(10)
            ```
        """

        async def _mapped() -> Result[U, E]:
            result = await self._awaitable
            if isinstance(result, Ok):
                return Ok(await f(result.value))
            return result

        return AsyncResult(_mapped(), self)

    def flat_map_async[U, F](self, f: Callable[[T], Awaitable[Result[U, F]]]) -> AsyncResult[U, E | F]:
        """Chain with an async function that returns a Result."""

        async def _chained() -> Result[U, E | F]:
            result = await self._awaitable
            if isinstance(result, Ok):
                return await f(result.value)
            return result

        return AsyncResult(_chained(), self)

    and_then_async = flat_map_async

    def zip_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncResult[tuple[T, U], E]:
        async def _zipped() -> Result[tuple[T, U], E]:
            result = await self._awaitable
            if isinstance(result, Ok):
                return Ok((result.value, await f(result.value)))
            return result

        return AsyncResult(_zipped(), self)

    def flat_zip_async[U, F](self, f: Callable[[T], Awaitable[Result[U, F]]]) -> AsyncResult[tuple[T, U], E | F]:
        async def _zipped() -> Result[tuple[T, U], E | F]:
            result = await self._awaitable
            if isinstance(result, Ok):
                other = await f(result.value)
                if isinstance(other, Ok):
                    return Ok((result.value, other.value))
                return other
            return result

        return AsyncResult(_zipped(), self)

    def map_err_async[F](self, f: Callable[[E], Awaitable[F]]) -> AsyncResult[T, F]:
        """Apply an async function to the Err value."""

        async def _mapped() -> Result[T, F]:
            result = await self._awaitable
            if isinstance(result, Err):
                return Err(await f(result.error))
            return result

        return AsyncResult(_mapped(), self)

    def zip_err_async[F](self, f: Callable[[T], Awaitable[Result[Any, F]]]) -> AsyncResult[T, E | F]:
        """Keep Ok(v) unless the awaited f(v) is an Err, which replaces it."""

        async def _checked() -> Result[T, E | F]:
            result = await self._awaitable
            if isinstance(result, Ok):
                other = await f(result.value)
                if isinstance(other, Err):
                    return other
            return result

        return AsyncResult(_checked(), self)

    def or_else_async[F](self, f: Callable[[E], Awaitable[Result[T, F]]]) -> AsyncResult[T, F]:
        """Recover from an Err with an async function."""

        async def _recovered() -> Result[T, F]:
            result = await self._awaitable
            if isinstance(result, Err):
                return await f(result.error)
            return result

        return AsyncResult(_recovered(), self)

    def tap_async(self, f: Callable[[T], Awaitable[object]]) -> AsyncResult[T, E]:
        async def _tapped() -> Result[T, E]:
            result = await self._awaitable
            if isinstance(result, Ok):
                await f(result.value)
            return result

        return AsyncResult(_tapped(), self)

    def tap_err_async(self, f: Callable[[E], Awaitable[object]]) -> AsyncResult[T, E]:
        async def _tapped() -> Result[T, E]:
            result = await self._awaitable
            if isinstance(result, Err):
                await f(result.error)
            return result

        return AsyncResult(_tapped(), self)

    def validate_async(
        self,
        validators: Iterable[Callable[[T], Awaitable[Result[Any, E]]]],
        limit: int | None = None,
    ) -> AsyncResult[T, Any]:
        """Run async validators concurrently and collect every error.

        Errors keep validator order regardless of completion order, so the
        outcome matches running the validators one by one.

        Args:
            validators: Async functions returning a Result; Ok payloads are ignored.
            limit: Maximum number of validators running at once. Defaults to
                the configured max_concurrency.

        Returns:
            AsyncResult of the original Ok, Err(list of errors), or the
            original Err (no validator runs).
        """
        from klaw_flow.aggregate import run_validators_async

        validators = list(validators)

        async def _validated() -> Result[T, Any]:
            result = await self._awaitable
            if isinstance(result, Err):
                return result
            errors = await run_validators_async(result.value, validators, limit=limit)
            if errors:
                return Err(errors)
            return result

        return AsyncResult(_validated(), self)

    # --- Terminal operations ---

    async def unwrap(self) -> T:
        """Await and unwrap; raises like ``Result.unwrap``."""
        return (await self._awaitable).unwrap()

    async def unwrap_or(self, default: T) -> T:
        return (await self._awaitable).unwrap_or(default)

    async def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return (await self._awaitable).unwrap_or_else(f)

    async def safe_unwrap(self) -> T | None:
        return (await self._awaitable).safe_unwrap()

    async def match[U](self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return (await self._awaitable).match(ok=ok, err=err)

    async def match_async[U](
        self,
        *,
        ok: Callable[[T], Awaitable[U]],
        err: Callable[[E], Awaitable[U]],
    ) -> U:
        """Await the Result, then await the matching handler."""
        result = await self._awaitable
        if isinstance(result, Ok):
            return await ok(result.value)
        return await err(result.error)

    def fold_async[U](
        self,
        on_ok: Callable[[T], Awaitable[U]],
        on_err: Callable[[E], Awaitable[U]],
    ) -> Coroutine[Any, Any, U]:
        """Positional form of ``match_async``."""
        return self.match_async(ok=on_ok, err=on_err)
