"""Result type: Ok[T] | Err[E] for operations that may fail.

Example:
    ```python
    from klaw_flow import Err, Ok, Result

    def parse(raw: str) -> Result[int, str]:
        return Result.try_catch(lambda: int(raw), lambda exc: f'bad int: {raw!r}')

    parse('21').map(lambda x: x * 2)  # Ok(42)
    parse('x').map(lambda x: x * 2)  # Err("bad int: 'x'")
    ```
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator, Iterable
from typing import TYPE_CHECKING, Any, Never, NoReturn, TypeIs

import msgspec

from klaw_flow.errors import UnwrappedErrWithOk, UnwrappedOkWithErr
from klaw_flow.propagate import Propagate

if TYPE_CHECKING:
    from klaw_flow.async_.result import AsyncResult
    from klaw_flow.engine import ResultAdapter
    from klaw_flow.option import NothingType, Some

__all__ = ['UNIT', 'UNIT_RESULT', 'Err', 'Ok', 'Result', 'UnitType']


class UnitType(msgspec.Struct, frozen=True, gc=False):
    """Payload of a success that carries no value. Use the `UNIT` constant."""

    def __repr__(self) -> str:
        return 'UNIT'


UNIT: UnitType = UnitType()


class Result[T, E]:
    """Discriminated union: Ok[T] | Err[E].

    This base class carries the constructors, aggregation helpers,
    sequencing entry points and async combinators; ``Ok`` and ``Err``
    implement the synchronous combinators.

    Example:
        ```python
        match fetch_user(user_id):
            case Ok(user):
                ...
            case Err(error):
                ...
        ```
    """

    __slots__ = ()

    # --- Constructors ---

    @staticmethod
    def from_nullable[U, F](value: U | None, error: F) -> Result[U, F]:
        """Ok(value) unless value is None, in which case Err(error)."""
        return Err(error) if value is None else Ok(value)

    @staticmethod
    def from_predicate[U, F](value: U, predicate: Callable[[U], bool], error: F) -> Result[U, F]:
        """Ok(value) if predicate(value) holds, else Err(error)."""
        return Ok(value) if predicate(value) else Err(error)

    @staticmethod
    def try_catch[U](
        fn: Callable[[], U],
        on_error: Callable[[Exception], Any] | None = None,
    ) -> Result[U, Any]:
        """Call fn, converting a raised exception into Err.

        A bail() raised inside fn is not an error; it passes through to the
        enclosing sequence or @result.

        Args:
            fn: Zero-argument callable to run.
            on_error: Maps the caught exception to the error payload. When
                omitted the exception itself becomes the payload.

        Returns:
            Ok(fn()) or Err(on_error(exc)).

        Example:
            ```python
            Result.try_catch(lambda: json.loads(raw))  # Ok({...}) or Err(JSONDecodeError(...))
            ```
        """
        try:
            return Ok(fn())
        except Propagate:
            raise
        except Exception as exc:
            return Err(exc if on_error is None else on_error(exc))

    @staticmethod
    def try_async_catch[U](
        fn: Callable[[], Awaitable[U]],
        on_error: Callable[[Exception], Any] | None = None,
    ) -> AsyncResult[U, Any]:
        """Await fn(), converting a raised exception into Err.

        Returns:
            An AsyncResult; await it (or chain on it) to get the Result.
        """
        from klaw_flow.async_.result import AsyncResult

        async def _run() -> Result[U, Any]:
            try:
                return Ok(await fn())
            except Propagate:
                raise
            except Exception as exc:
                return Err(exc if on_error is None else on_error(exc))

        return AsyncResult(_run())

    # --- Aggregation ---

    @staticmethod
    def all(*results: Result[Any, Any]) -> Result[list[Any], list[Any]]:
        """Ok of every value if all are Ok, else Err of every error in input order.

        Unlike chaining ``flat_map``, all inputs are inspected so every error is
        reported. ``Result.all()`` is ``Ok([])``.
        """
        from klaw_flow.aggregate import all_results

        return all_results(results)

    @staticmethod
    def any(*results: Result[Any, Any]) -> Result[Any, list[Any]]:
        """First Ok in input order, else Err of all errors."""
        from klaw_flow.aggregate import any_result

        return any_result(results)

    @staticmethod
    async def all_async(
        *awaitables: Awaitable[Result[Any, Any]],
        limit: int | None = None,
    ) -> Result[list[Any], list[Any]]:
        """Resolve awaitables concurrently, then apply ``Result.all`` in input order."""
        from klaw_flow.aggregate import all_results_async

        return await all_results_async(awaitables, limit=limit)

    @staticmethod
    async def any_async(*awaitables: Awaitable[Result[Any, Any]]) -> Result[Any, list[Any]]:
        """Await in order and return the first Ok; remaining awaitables are closed."""
        from klaw_flow.aggregate import any_result_async

        return await any_result_async(awaitables)

    # --- Sequencing ---

    @staticmethod
    def gen[R](body: Callable[[], Generator[Result[Any, Any], Any, R]]) -> Result[R, Any]:
        """Run a generator that yields Results; each yield receives the Ok value.

        The first Err ends the sequence (the generator is closed, running its
        ``finally`` blocks) and is returned unchanged.

        Example:
            ```python
            def body():
                user = yield fetch_user(user_id)
                orders = yield fetch_orders(user.id)
                return len(orders)

            Result.gen(body)  # Ok(3) or the first Err
            ```
        """
        from klaw_flow.engine import RESULT, run

        return run(RESULT, body())

    @staticmethod
    def gen_adapter[R](body: Callable[[ResultAdapter], Generator[Any, Any, R]]) -> Result[R, Any]:
        """Like ``gen`` but the body receives an adapter.

        ``x = yield step(result)`` unwraps; ``yield step.fail(error)`` aborts
        with ``Err(error)``.
        """
        from klaw_flow.engine import RESULT, ResultAdapter, run

        return run(RESULT, body(ResultAdapter()))

    @staticmethod
    async def async_gen(body: Callable[[], AsyncGenerator[Any, Any]]) -> Result[Any, Any]:
        """Async ``gen``; the payload of the last yielded step is the result."""
        from klaw_flow.engine import RESULT, run_async

        return await run_async(RESULT, body())

    @staticmethod
    async def async_gen_adapter(body: Callable[[ResultAdapter], AsyncGenerator[Any, Any]]) -> Result[Any, Any]:
        """Async ``gen_adapter``; ``step(awaitable)`` is resolved by the engine."""
        from klaw_flow.engine import RESULT, ResultAdapter, run_async

        return await run_async(RESULT, body(ResultAdapter()))

    # --- Variant interface ---

    def is_ok(self) -> TypeIs[Ok[T]]: ...
    def is_err(self) -> TypeIs[Err[E]]: ...
    def is_unit(self) -> bool: ...
    def unwrap(self) -> T: ...
    def expect(self, msg: str) -> T: ...
    def unwrap_err(self) -> E: ...
    def unwrap_or(self, default: T) -> T: ...
    def unwrap_or_else(self, f: Callable[[E], T]) -> T: ...
    def safe_unwrap(self) -> T | None: ...
    def map_or[U](self, default: U, f: Callable[[T], U]) -> U: ...
    def map[U](self, f: Callable[[T], U]) -> Result[U, E]: ...
    def flat_map[U, F](self, f: Callable[[T], Result[U, F]]) -> Result[U, E | F]: ...
    def and_then[U, F](self, f: Callable[[T], Result[U, F]]) -> Result[U, E | F]: ...
    def zip[U](self, f: Callable[[T], U]) -> Result[tuple[T, U], E]: ...
    def flat_zip[U, F](self, f: Callable[[T], Result[U, F]]) -> Result[tuple[T, U], E | F]: ...
    def inner_map[U](self, f: Callable[[Any], U]) -> Result[Any, E]: ...
    def map_err[F](self, f: Callable[[E], F]) -> Result[T, F]: ...
    def zip_err[F](self, f: Callable[[T], Result[Any, F]]) -> Result[T, E | F]: ...
    def map_both[U, F](self, f_ok: Callable[[T], U], f_err: Callable[[E], F]) -> Result[U, F]: ...
    def validate(self, validators: Iterable[Callable[[T], Result[Any, E]]]) -> Result[T, Any]: ...
    def or_else[F](self, f: Callable[[E], Result[T, F]]) -> Result[T, F]: ...
    def tap(self, f: Callable[[T], object]) -> Result[T, E]: ...
    def tap_err(self, f: Callable[[E], object]) -> Result[T, E]: ...
    def flip(self) -> Result[E, T]: ...
    def to_option(self) -> Some[T] | NothingType: ...
    def match[U](self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U: ...
    def fold[U](self, on_ok: Callable[[T], U], on_err: Callable[[E], U]) -> U: ...
    def bail(self) -> T: ...

    # --- Async combinators ---

    def _deferred(self) -> AsyncResult[T, E]:
        from klaw_flow.async_.result import AsyncResult

        return AsyncResult.from_result(self)

    def map_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncResult[U, E]:
        """Apply an async function to the Ok value."""
        return self._deferred().map_async(f)

    def flat_map_async[U, F](self, f: Callable[[T], Awaitable[Result[U, F]]]) -> AsyncResult[U, E | F]:
        """Chain an async function returning a Result."""
        return self._deferred().flat_map_async(f)

    def zip_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncResult[tuple[T, U], E]:
        """Pair the Ok value with the awaited result of f."""
        return self._deferred().zip_async(f)

    def flat_zip_async[U, F](self, f: Callable[[T], Awaitable[Result[U, F]]]) -> AsyncResult[tuple[T, U], E | F]:
        """Pair the Ok value with the payload of an awaited Result."""
        return self._deferred().flat_zip_async(f)

    def map_err_async[F](self, f: Callable[[E], Awaitable[F]]) -> AsyncResult[T, F]:
        """Apply an async function to the Err value."""
        return self._deferred().map_err_async(f)

    def zip_err_async[F](self, f: Callable[[T], Awaitable[Result[Any, F]]]) -> AsyncResult[T, E | F]:
        """Async ``zip_err``: keep Ok(v) unless f(v) resolves to an Err."""
        return self._deferred().zip_err_async(f)

    def or_else_async[F](self, f: Callable[[E], Awaitable[Result[T, F]]]) -> AsyncResult[T, F]:
        """Recover from Err with an async function."""
        return self._deferred().or_else_async(f)

    def tap_async(self, f: Callable[[T], Awaitable[object]]) -> AsyncResult[T, E]:
        """Await a side effect on the Ok value."""
        return self._deferred().tap_async(f)

    def tap_err_async(self, f: Callable[[E], Awaitable[object]]) -> AsyncResult[T, E]:
        """Await a side effect on the Err value."""
        return self._deferred().tap_err_async(f)

    def validate_async(
        self,
        validators: Iterable[Callable[[T], Awaitable[Result[Any, E]]]],
        limit: int | None = None,
    ) -> AsyncResult[T, Any]:
        """Run async validators concurrently; errors are collected in validator order."""
        return self._deferred().validate_async(validators, limit=limit)

    async def match_async[U](
        self,
        *,
        ok: Callable[[T], Awaitable[U]],
        err: Callable[[E], Awaitable[U]],
    ) -> U:
        """Dispatch to an async handler and await its result."""
        return await self._deferred().match_async(ok=ok, err=err)

    async def fold_async[U](
        self,
        on_ok: Callable[[T], Awaitable[U]],
        on_err: Callable[[E], Awaitable[U]],
    ) -> U:
        """Positional form of ``match_async``."""
        return await self._deferred().fold_async(on_ok, on_err)


class Ok[T](msgspec.Struct, Result[T, Never], frozen=True, gc=False):
    """Ok variant of Result containing a success value.

    Examples:
        >>> Ok(42).unwrap()
        42
        >>> Ok(42).map(lambda x: x * 2)
        Ok(84)
    """

    value: T

    def __repr__(self) -> str:
        return f'Ok({self.value!r})'

    def is_ok(self) -> TypeIs[Ok[T]]:
        """Return True since this is Ok."""
        return True

    def is_err(self) -> TypeIs[Err[Any]]:
        """Return False since this is Ok."""
        return False

    def is_unit(self) -> bool:
        """Return True if the value is UNIT."""
        return isinstance(self.value, UnitType)

    def unwrap(self) -> T:
        """Return the success value."""
        return self.value

    def expect(self, msg: str) -> T:  # noqa: ARG002
        """Return the success value, ignoring the message."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Raise since Ok has no error.

        Raises:
            UnwrappedErrWithOk: Always, carrying the Ok value.
        """
        raise UnwrappedErrWithOk(self.value)

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        """Return the success value, ignoring the default."""
        return self.value

    def unwrap_or_else(self, f: Callable[[Any], T]) -> T:  # noqa: ARG002
        """Return the success value without calling f."""
        return self.value

    def safe_unwrap(self) -> T:
        """Return the success value."""
        return self.value

    def map_or[U](self, default: U, f: Callable[[T], U]) -> U:  # noqa: ARG002
        """Return f(value)."""
        return f(self.value)

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply a function to the success value.

        Args:
            f: Function to apply to the Ok value.

        Returns:
            Ok containing the result of applying f to the value.
        """
        return Ok(f(self.value))

    def flat_map[U, F](self, f: Callable[[T], Result[U, F]]) -> Result[U, F]:
        """Chain a Result-returning function.

        Args:
            f: Function that takes T and returns Result[U, F].

        Returns:
            The Result returned by f.
        """
        return f(self.value)

    and_then = flat_map

    def zip[U](self, f: Callable[[T], U]) -> Ok[tuple[T, U]]:
        """Pair the value with a derived value: Ok((value, f(value)))."""
        return Ok((self.value, f(self.value)))

    def flat_zip[U, F](self, f: Callable[[T], Result[U, F]]) -> Result[tuple[T, U], F]:
        """Pair the value with the Ok payload of f(value), or return f's Err."""
        other = f(self.value)
        if isinstance(other, Ok):
            return Ok((self.value, other.value))
        return other

    def inner_map[U](self, f: Callable[[Any], U]) -> Ok[Any]:
        """Map f over a sequence payload. Tuples stay tuples, other iterables become lists."""
        items: Iterable[Any] = self.value  # type: ignore[assignment]
        if isinstance(items, tuple):
            return Ok(tuple(f(item) for item in items))
        return Ok([f(item) for item in items])

    def map_err(self, f: Callable[[Any], Any]) -> Ok[T]:  # noqa: ARG002
        """Return self unchanged."""
        return self

    def zip_err[F](self, f: Callable[[T], Result[Any, F]]) -> Result[T, F]:
        """Run a check on the value: its Err replaces self, its Ok is discarded.

        Args:
            f: Function that takes T and returns a Result.

        Returns:
            f(value) if it is an Err, otherwise self.
        """
        other = f(self.value)
        if isinstance(other, Err):
            return other
        return self

    def map_both[U](self, f_ok: Callable[[T], U], f_err: Callable[[Any], Any]) -> Ok[U]:  # noqa: ARG002
        """Apply f_ok to the success value."""
        return Ok(f_ok(self.value))

    def validate(self, validators: Iterable[Callable[[T], Result[Any, Any]]]) -> Result[T, list[Any]]:
        """Run every validator against the value and collect all errors.

        Validators run in order without short-circuiting.

        Args:
            validators: Functions returning a Result; their Ok payload is ignored.

        Returns:
            self if no validator failed, otherwise Err of every error in
            validator order (always a list, even for a single error).
        """
        from klaw_flow.aggregate import run_validators

        errors = run_validators(self.value, validators)
        if errors:
            return Err(errors)
        return self

    def or_else(self, f: Callable[[Any], Result[T, Any]]) -> Ok[T]:  # noqa: ARG002
        """Return self without calling f."""
        return self

    def tap(self, f: Callable[[T], object]) -> Ok[T]:
        """Call f with the value for its side effect and return self."""
        f(self.value)
        return self

    def tap_err(self, f: Callable[[Any], object]) -> Ok[T]:  # noqa: ARG002
        """Return self without calling f."""
        return self

    def flip(self) -> Err[T]:
        """Swap the channels: Ok(v) becomes Err(v)."""
        return Err(self.value)

    def to_option(self) -> Some[T]:
        """Convert to Option, returning Some(value)."""
        from klaw_flow.option import Some

        return Some(self.value)

    def match[U](self, *, ok: Callable[[T], U], err: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Dispatch to the ``ok`` handler."""
        return ok(self.value)

    def fold[U](self, on_ok: Callable[[T], U], on_err: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Positional form of ``match``: return on_ok(value)."""
        return on_ok(self.value)

    def bail(self) -> T:
        """Return the success value (no-op for Ok)."""
        return self.value


class Err[E](msgspec.Struct, Result[Never, E], frozen=True, gc=False):
    """Err variant of Result containing an error value.

    The payload is any value. Exceptions are common but not required.

    Examples:
        >>> Err('boom').unwrap_or(0)
        0
        >>> Err('boom').map_err(str.upper)
        Err('BOOM')
    """

    error: E

    def __repr__(self) -> str:
        return f'Err({self.error!r})'

    def is_ok(self) -> TypeIs[Ok[Any]]:
        """Return False since this is Err."""
        return False

    def is_err(self) -> TypeIs[Err[E]]:
        """Return True since this is Err."""
        return True

    def is_unit(self) -> bool:
        """Return False since this is Err."""
        return False

    def unwrap(self) -> NoReturn:
        """Raise the error.

        Raises:
            BaseException: The payload itself, when it is an exception.
            UnwrappedOkWithErr: Otherwise, carrying the payload.
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise UnwrappedOkWithErr(self.error)

    def expect(self, msg: str) -> NoReturn:
        """Raise with a custom message.

        Raises:
            UnwrappedOkWithErr: Always; chained to the payload if it is an exception.
        """
        if isinstance(self.error, BaseException):
            raise UnwrappedOkWithErr(self.error, msg) from self.error
        raise UnwrappedOkWithErr(self.error, msg)

    def unwrap_err(self) -> E:
        """Return the error value."""
        return self.error

    def unwrap_or[T](self, default: T) -> T:
        """Return the default value."""
        return default

    def unwrap_or_else[T](self, f: Callable[[E], T]) -> T:
        """Compute a fallback from the error."""
        return f(self.error)

    def safe_unwrap(self) -> None:
        """Return None."""
        return None

    def map_or[U](self, default: U, f: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Return the default."""
        return default

    def map(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        """Return self since there's no value to map."""
        return self

    def flat_map(self, f: Callable[[Any], Result[Any, Any]]) -> Err[E]:  # noqa: ARG002
        """Return self without calling f."""
        return self

    and_then = flat_map

    def zip(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        """Return self."""
        return self

    def flat_zip(self, f: Callable[[Any], Result[Any, Any]]) -> Err[E]:  # noqa: ARG002
        """Return self."""
        return self

    def inner_map(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        """Return self."""
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Apply a function to the error value.

        Args:
            f: Function to apply to the error.

        Returns:
            Err containing the transformed error.
        """
        return Err(f(self.error))

    def zip_err(self, f: Callable[[Any], Result[Any, Any]]) -> Err[E]:  # noqa: ARG002
        """Return self without calling f."""
        return self

    def map_both[F](self, f_ok: Callable[[Any], Any], f_err: Callable[[E], F]) -> Err[F]:  # noqa: ARG002
        """Apply f_err to the error value."""
        return Err(f_err(self.error))

    def validate(self, validators: Iterable[Callable[[Any], Result[Any, Any]]]) -> Err[E]:  # noqa: ARG002
        """Return self; no validator runs."""
        return self

    def or_else[T, F](self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        """Recover by calling f with the error."""
        return f(self.error)

    def tap(self, f: Callable[[Any], object]) -> Err[E]:  # noqa: ARG002
        """Return self without calling f."""
        return self

    def tap_err(self, f: Callable[[E], object]) -> Err[E]:
        """Call f with the error for its side effect and return self."""
        f(self.error)
        return self

    def flip(self) -> Ok[E]:
        """Swap the channels: Err(e) becomes Ok(e)."""
        return Ok(self.error)

    def to_option(self) -> NothingType:
        """Convert to Option, returning Nothing."""
        from klaw_flow.option import Nothing

        return Nothing

    def match[U](self, *, ok: Callable[[Any], U], err: Callable[[E], U]) -> U:  # noqa: ARG002
        """Dispatch to the ``err`` handler."""
        return err(self.error)

    def fold[U](self, on_ok: Callable[[Any], U], on_err: Callable[[E], U]) -> U:  # noqa: ARG002
        """Positional form of ``match``: return on_err(error)."""
        return on_err(self.error)

    def bail(self) -> NoReturn:
        """Raise Propagate to hand this Err to the enclosing sequence or @result.

        Raises:
            Propagate: Always, containing this Err.
        """
        raise Propagate(self)


UNIT_RESULT: Ok[UnitType] = Ok(UNIT)
"""Shared Ok(UNIT) for successes without a payload."""

