"""Option type: Some[T] | Nothing for optional values.

Example:
    ```python
    from klaw_flow import Nothing, Option, Some

    Option.from_nullable(user.get('email')).map(str.lower).unwrap_or('')

    Some(5).filter(lambda x: x > 0).zip(lambda x: x * 2)  # Some((5, 10))
    Nothing.map(lambda x: x * 2)  # Nothing
    ```
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator, Iterable
from typing import TYPE_CHECKING, Any, Never, NoReturn, TypeIs

import msgspec

from klaw_flow.errors import UnwrappedNone
from klaw_flow.propagate import Propagate

if TYPE_CHECKING:
    from klaw_flow.async_.option import AsyncOption
    from klaw_flow.engine import OptionAdapter
    from klaw_flow.result import Err, Ok

__all__ = ['Nothing', 'NothingType', 'Option', 'Some']


class Option[T]:
    """Discriminated union: Some[T] | Nothing.

    This base class carries the constructors, aggregation helpers,
    sequencing entry points and async combinators; the variant classes
    implement the synchronous combinators. Use ``match`` to dispatch:

    Example:
        ```python
        match Option.from_nullable(value):
            case Some(v):
                ...
            case NothingType():
                ...
        ```
    """

    __slots__ = ()

    # --- Constructors ---

    @staticmethod
    def from_nullable[U](value: U | None) -> Option[U]:
        """Some(value) unless value is None. 0, '' and [] are present values."""
        return Nothing if value is None else Some(value)

    @staticmethod
    def from_falsy[U](value: U) -> Option[U]:
        """Some(value) unless value is falsy (False, 0, '', empty collection, None)."""
        return Some(value) if value else Nothing

    @staticmethod
    def from_predicate[U](value: U, predicate: Callable[[U], bool]) -> Option[U]:
        """Some(value) if predicate(value) holds, else Nothing."""
        return Some(value) if predicate(value) else Nothing

    # --- Aggregation ---

    @staticmethod
    def all(*options: Option[Any]) -> Option[list[Any]]:
        """Some of every value if all options are Some, else Nothing.

        Stops at the first Nothing in input order. ``Option.all()`` is ``Some([])``.
        """
        from klaw_flow.aggregate import all_options

        return all_options(options)

    @staticmethod
    def any(*options: Option[Any]) -> Option[Any]:
        """First Some in input order, else Nothing."""
        from klaw_flow.aggregate import any_option

        return any_option(options)

    @staticmethod
    async def all_async(*awaitables: Awaitable[Option[Any]], limit: int | None = None) -> Option[list[Any]]:
        """Resolve awaitables concurrently, then apply ``Option.all`` in input order.

        Args:
            *awaitables: Awaitables producing Options.
            limit: Maximum number running at once. Defaults to the configured
                max_concurrency.
        """
        from klaw_flow.aggregate import all_options_async

        return await all_options_async(awaitables, limit=limit)

    @staticmethod
    async def any_async(*awaitables: Awaitable[Option[Any]]) -> Option[Any]:
        """Await in order and return the first Some; remaining awaitables are closed."""
        from klaw_flow.aggregate import any_option_async

        return await any_option_async(awaitables)

    # --- Sequencing ---

    @staticmethod
    def gen[R](body: Callable[[], Generator[Option[Any], Any, R]]) -> Option[R]:
        """Run a generator that yields Options; each yield receives the payload.

        The first Nothing ends the sequence and is returned. Otherwise the
        generator's return value is wrapped in Some.

        Example:
            ```python
            def body():
                a = yield Some(1)
                b = yield Option.from_nullable(lookup(a))
                return a + b

            Option.gen(body)
            ```
        """
        from klaw_flow.engine import OPTION, run

        return run(OPTION, body())

    @staticmethod
    def gen_adapter[R](body: Callable[[OptionAdapter], Generator[Any, Any, R]]) -> Option[R]:
        """Like ``gen`` but the body receives an adapter: ``x = yield step(opt)``."""
        from klaw_flow.engine import OPTION, OptionAdapter, run

        return run(OPTION, body(OptionAdapter()))

    @staticmethod
    async def async_gen(body: Callable[[], AsyncGenerator[Any, Any]]) -> Option[Any]:
        """Async ``gen``: yielded awaitables are awaited before unwrapping.

        Async generators cannot return a value, so the payload of the last
        yielded step is the result.
        """
        from klaw_flow.engine import OPTION, run_async

        return await run_async(OPTION, body())

    @staticmethod
    async def async_gen_adapter(body: Callable[[OptionAdapter], AsyncGenerator[Any, Any]]) -> Option[Any]:
        """Async ``gen_adapter``; ``step(awaitable)`` is resolved by the engine."""
        from klaw_flow.engine import OPTION, OptionAdapter, run_async

        return await run_async(OPTION, body(OptionAdapter()))

    # --- Variant interface ---

    def is_some(self) -> TypeIs[Some[T]]: ...
    def is_none(self) -> TypeIs[NothingType]: ...
    def unwrap(self) -> T: ...
    def expect(self, msg: str) -> T: ...
    def unwrap_or(self, default: T) -> T: ...
    def unwrap_or_else(self, f: Callable[[], T]) -> T: ...
    def safe_unwrap(self) -> T | None: ...
    def map_or[U](self, default: U, f: Callable[[T], U]) -> U: ...
    def map[U](self, f: Callable[[T], U]) -> Option[U]: ...
    def flat_map[U](self, f: Callable[[T], Option[U]]) -> Option[U]: ...
    def and_then[U](self, f: Callable[[T], Option[U]]) -> Option[U]: ...
    def filter(self, predicate: Callable[[T], bool]) -> Option[T]: ...
    def zip[U](self, f: Callable[[T], U]) -> Option[tuple[T, U]]: ...
    def flat_zip[U](self, f: Callable[[T], Option[U]]) -> Option[tuple[T, U]]: ...
    def inner_map[U](self, f: Callable[[Any], U]) -> Option[Any]: ...
    def tap(self, f: Callable[[T], object]) -> Option[T]: ...
    def to_result[E](self, error: E) -> Ok[T] | Err[E]: ...
    def match[U](self, *, some: Callable[[T], U], none: Callable[[], U]) -> U: ...
    def fold[U](self, on_some: Callable[[T], U], on_none: Callable[[], U]) -> U: ...
    def bail(self) -> T: ...

    # --- Async combinators ---

    def _deferred(self) -> AsyncOption[T]:
        from klaw_flow.async_.option import AsyncOption

        return AsyncOption.from_option(self)

    def map_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncOption[U]:
        """Apply an async function to the Some value."""
        return self._deferred().map_async(f)

    def flat_map_async[U](self, f: Callable[[T], Awaitable[Option[U]]]) -> AsyncOption[U]:
        """Chain an async function returning an Option."""
        return self._deferred().flat_map_async(f)

    def filter_async(self, predicate: Callable[[T], Awaitable[bool]]) -> AsyncOption[T]:
        """Keep the value if the async predicate holds."""
        return self._deferred().filter_async(predicate)

    def zip_async[U](self, f: Callable[[T], Awaitable[U]]) -> AsyncOption[tuple[T, U]]:
        """Pair the value with the awaited result of f."""
        return self._deferred().zip_async(f)

    def flat_zip_async[U](self, f: Callable[[T], Awaitable[Option[U]]]) -> AsyncOption[tuple[T, U]]:
        """Pair the value with the payload of an awaited Option."""
        return self._deferred().flat_zip_async(f)

    def tap_async(self, f: Callable[[T], Awaitable[object]]) -> AsyncOption[T]:
        """Await a side effect on the Some value; the Option is unchanged."""
        return self._deferred().tap_async(f)

    async def match_async[U](
        self,
        *,
        some: Callable[[T], Awaitable[U]],
        none: Callable[[], Awaitable[U]],
    ) -> U:
        """Dispatch to an async handler and await its result."""
        return await self._deferred().match_async(some=some, none=none)

    async def fold_async[U](
        self,
        on_some: Callable[[T], Awaitable[U]],
        on_none: Callable[[], Awaitable[U]],
    ) -> U:
        """Positional form of ``match_async``."""
        return await self._deferred().fold_async(on_some, on_none)


class Some[T](msgspec.Struct, Option[T], frozen=True, gc=False):
    """Some variant of Option containing a value of type T.

    Some represents the presence of a value. ``Some(None)`` is a present
    value; only the ``from_nullable``/``from_falsy`` constructors look at
    the payload.

    Examples:
        >>> Some(42).unwrap()
        42
        >>> Some(42).map(lambda x: x * 2)
        Some(84)
    """

    value: T

    def __repr__(self) -> str:
        return f'Some({self.value!r})'

    def is_some(self) -> TypeIs[Some[T]]:
        """Return True since this is Some."""
        return True

    def is_none(self) -> TypeIs[NothingType]:
        """Return False since this is Some."""
        return False

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def expect(self, msg: str) -> T:  # noqa: ARG002
        """Return the contained value, ignoring the message."""
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        """Return the contained value, ignoring the default."""
        return self.value

    def unwrap_or_else(self, f: Callable[[], T]) -> T:  # noqa: ARG002
        """Return the contained value without calling the fallback."""
        return self.value

    def safe_unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def map_or[U](self, default: U, f: Callable[[T], U]) -> U:  # noqa: ARG002
        """Return f(value)."""
        return f(self.value)

    def map[U](self, f: Callable[[T], U]) -> Some[U]:
        """Apply a function to the contained value.

        Args:
            f: Function to apply to the Some value.

        Returns:
            Some containing the result of applying f to the value.
        """
        return Some(f(self.value))

    def flat_map[U](self, f: Callable[[T], Option[U]]) -> Option[U]:
        """Apply a function that returns an Option and return it as is.

        Args:
            f: Function that takes T and returns Option[U].

        Returns:
            The Option returned by f.
        """
        return f(self.value)

    and_then = flat_map

    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        """Return self if the predicate is satisfied, else Nothing."""
        if predicate(self.value):
            return self
        return Nothing

    def zip[U](self, f: Callable[[T], U]) -> Some[tuple[T, U]]:
        """Pair the value with a derived value: Some((value, f(value)))."""
        return Some((self.value, f(self.value)))

    def flat_zip[U](self, f: Callable[[T], Option[U]]) -> Option[tuple[T, U]]:
        """Pair the value with the payload of f(value) if that is Some.

        Args:
            f: Function that takes T and returns Option[U].

        Returns:
            Some((value, u)) if f(value) is Some(u), else Nothing.
        """
        other = f(self.value)
        if isinstance(other, Some):
            return Some((self.value, other.value))
        return Nothing

    def inner_map[U](self, f: Callable[[Any], U]) -> Some[Any]:
        """Map f over a sequence payload. Tuples stay tuples, other iterables become lists."""
        items: Iterable[Any] = self.value  # type: ignore[assignment]
        if isinstance(items, tuple):
            return Some(tuple(f(item) for item in items))
        return Some([f(item) for item in items])

    def tap(self, f: Callable[[T], object]) -> Some[T]:
        """Call f with the value for its side effect and return self."""
        f(self.value)
        return self

    def to_result[E](self, error: E) -> Ok[T]:  # noqa: ARG002
        """Convert to Result, returning Ok(value)."""
        from klaw_flow.result import Ok

        return Ok(self.value)

    def match[U](self, *, some: Callable[[T], U], none: Callable[[], U]) -> U:  # noqa: ARG002
        """Dispatch to the ``some`` handler."""
        return some(self.value)

    def fold[U](self, on_some: Callable[[T], U], on_none: Callable[[], U]) -> U:  # noqa: ARG002
        """Positional form of ``match``: return on_some(value)."""
        return on_some(self.value)

    def bail(self) -> T:
        """Return the contained value (no-op for Some).

        This is the equivalent of Rust's ? operator. For Nothing it raises
        Propagate instead.
        """
        return self.value


class NothingType(msgspec.Struct, Option[Never], frozen=True, gc=False):
    """Nothing variant of Option representing absence of a value.

    This is a singleton - use the `Nothing` constant instead of
    instantiating directly.

    Examples:
        >>> Nothing.is_none()
        True
        >>> Nothing.unwrap_or(0)
        0
    """

    def __repr__(self) -> str:
        return 'Nothing'

    def is_some(self) -> TypeIs[Some[Any]]:
        """Return False since this is Nothing."""
        return False

    def is_none(self) -> TypeIs[NothingType]:
        """Return True since this is Nothing."""
        return True

    def unwrap(self) -> NoReturn:
        """Raise since Nothing has no value.

        Raises:
            UnwrappedNone: Always.
        """
        raise UnwrappedNone

    def expect(self, msg: str) -> NoReturn:
        """Raise with a custom message.

        Raises:
            UnwrappedNone: Always, with the custom message.
        """
        raise UnwrappedNone(msg)

    def unwrap_or[T](self, default: T) -> T:
        """Return the default value."""
        return default

    def unwrap_or_else[T](self, f: Callable[[], T]) -> T:
        """Compute and return a default value."""
        return f()

    def safe_unwrap(self) -> None:
        """Return None."""
        return None

    def map_or[U](self, default: U, f: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Return the default."""
        return default

    def map(self, f: Callable[[Any], Any]) -> NothingType:  # noqa: ARG002
        """Return Nothing since there's no value to map."""
        return self

    def flat_map(self, f: Callable[[Any], Option[Any]]) -> NothingType:  # noqa: ARG002
        """Return Nothing since there's no value to bind."""
        return self

    and_then = flat_map

    def filter(self, predicate: Callable[[Any], bool]) -> NothingType:  # noqa: ARG002
        """Return Nothing."""
        return self

    def zip(self, f: Callable[[Any], Any]) -> NothingType:  # noqa: ARG002
        """Return Nothing."""
        return self

    def flat_zip(self, f: Callable[[Any], Option[Any]]) -> NothingType:  # noqa: ARG002
        """Return Nothing without calling f."""
        return self

    def inner_map(self, f: Callable[[Any], Any]) -> NothingType:  # noqa: ARG002
        """Return Nothing."""
        return self

    def tap(self, f: Callable[[Any], object]) -> NothingType:  # noqa: ARG002
        """Return Nothing without calling f."""
        return self

    def to_result[E](self, error: E) -> Err[E]:
        """Convert to Result, returning Err(error)."""
        from klaw_flow.result import Err

        return Err(error)

    def match[U](self, *, some: Callable[[Any], U], none: Callable[[], U]) -> U:  # noqa: ARG002
        """Dispatch to the ``none`` handler."""
        return none()

    def fold[U](self, on_some: Callable[[Any], U], on_none: Callable[[], U]) -> U:  # noqa: ARG002
        """Positional form of ``match``: return on_none()."""
        return on_none()

    def bail(self) -> NoReturn:
        """Raise Propagate to hand Nothing to the enclosing sequence or @result.

        Raises:
            Propagate: Always, containing Nothing.
        """
        raise Propagate(self)


Nothing: NothingType = NothingType()
"""Singleton instance representing the absence of a value."""
