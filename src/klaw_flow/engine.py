"""Generator sequencing engine behind Option.gen, Result.gen and Flow.gen.

A sequence is a generator that yields containers. The engine resolves each
yielded step: a success sends its payload back into the generator, a failure
raises ``Propagate`` which the engine catches, closes the generator (running
its ``finally`` blocks) and returns the failure. ``container.bail()`` inside
the body raises the same signal directly.

Two disciplines are supported:

- direct: ``x = yield container``
- adapter: the body receives a ``step`` callable, ``x = yield step(container)``
  and ``yield step.fail(error)`` to abort with an error directly.

Example:
    ```python
    def body(step):
        user = yield step(find_user(user_id))
        if not user.active:
            yield step.fail('inactive')
        return user.name

    Result.gen_adapter(body)
    ```
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncGenerator, Generator
from dataclasses import dataclass
from types import CodeType, FrameType
from typing import Any

from klaw_flow._config import get_config
from klaw_flow._logging import get_logger
from klaw_flow.errors import AbsenceError, FlowError, Origin
from klaw_flow.option import Nothing, NothingType, Some
from klaw_flow.propagate import Propagate
from klaw_flow.result import Err, Ok

__all__ = [
    'FLOW',
    'OPTION',
    'RESULT',
    'Abort',
    'Adapter',
    'FlowAdapter',
    'OptionAdapter',
    'ResultAdapter',
    'SequenceKind',
    'Step',
    'run',
    'run_async',
]


# --- Step markers ---


@dataclass(slots=True, frozen=True)
class Step:
    """A container (or an awaitable of one) yielded through an adapter."""

    value: Any


@dataclass(slots=True, frozen=True)
class Abort:
    """A direct abort yielded through ``step.fail(error)``."""

    error: Any


class Adapter:
    """Callable handed to adapter-discipline bodies.

    ``step(container)`` marks a step to resolve; ``step.fail(error)`` marks a
    direct abort.
    """

    __slots__ = ()

    def __call__(self, value: Any) -> Step:
        return Step(value)

    def fail(self, error: Any = None) -> Abort:
        return Abort(error)


class OptionAdapter(Adapter):
    """Adapter for Option sequences; ``fail()`` ends the sequence with Nothing."""

    __slots__ = ()


class ResultAdapter(Adapter):
    """Adapter for Result sequences; ``fail(error)`` ends the sequence with Err(error)."""

    __slots__ = ()


class FlowAdapter(Adapter):
    """Adapter for Flow sequences; accepts both Option and Result steps."""

    __slots__ = ()


# --- Kinds ---


class SequenceKind:
    """How a sequence kind unwraps steps and builds its outcome."""

    name = 'sequence'

    def resolve(self, value: Any) -> Any:
        """Return the payload of a successful step or raise Propagate with the failure."""
        raise NotImplementedError

    def succeed(self, value: Any) -> Any:
        """Wrap the sequence's final value."""
        raise NotImplementedError

    def abort(self, error: Any) -> Any:
        """Failure container for ``step.fail(error)``."""
        return Err(error)

    def failure(self, container: Any, origin: Origin | None) -> Any:  # noqa: ARG002
        """Outcome for a failure carried by Propagate."""
        return container

    def _wrong_kind(self, value: Any) -> TypeError:
        return TypeError(f'{self.name} sequence cannot yield {value!r}')


class _OptionKind(SequenceKind):
    name = 'option'

    def resolve(self, value: Any) -> Any:
        if isinstance(value, Some):
            return value.value
        if isinstance(value, NothingType):
            raise Propagate(value)
        if isinstance(value, Abort):
            raise Propagate(self.abort(value.error))
        raise self._wrong_kind(value)

    def succeed(self, value: Any) -> Some[Any]:
        return Some(value)

    def abort(self, error: Any) -> NothingType:  # noqa: ARG002
        return Nothing

    def failure(self, container: Any, origin: Origin | None) -> Any:  # noqa: ARG002
        if not isinstance(container, NothingType):
            raise self._wrong_kind(container)
        return container


class _ResultKind(SequenceKind):
    name = 'result'

    def resolve(self, value: Any) -> Any:
        if isinstance(value, Ok):
            return value.value
        if isinstance(value, Err):
            raise Propagate(value)
        if isinstance(value, Abort):
            raise Propagate(self.abort(value.error))
        raise self._wrong_kind(value)

    def succeed(self, value: Any) -> Ok[Any]:
        return Ok(value)

    def failure(self, container: Any, origin: Origin | None) -> Any:  # noqa: ARG002
        if not isinstance(container, Err):
            raise self._wrong_kind(container)
        return container


class _FlowKind(SequenceKind):
    name = 'flow'

    def resolve(self, value: Any) -> Any:
        if isinstance(value, (Some, Ok)):
            return value.value
        if isinstance(value, (NothingType, Err)):
            raise Propagate(value)
        if isinstance(value, FlowError):
            raise Propagate(Err(value))
        if isinstance(value, Abort):
            raise Propagate(self.abort(value.error))
        raise self._wrong_kind(value)

    def succeed(self, value: Any) -> Ok[Any]:
        return Ok(value)

    def failure(self, container: Any, origin: Origin | None) -> Any:
        if isinstance(container, NothingType):
            return Err(AbsenceError(origin=origin))
        if isinstance(container, Err):
            _mark(container.error, origin)
            return container
        raise self._wrong_kind(container)


OPTION: SequenceKind = _OptionKind()
RESULT: SequenceKind = _ResultKind()
FLOW: SequenceKind = _FlowKind()


# --- Origin & logging ---


def _origin(signal: BaseException, frame: FrameType | None, code: CodeType) -> Origin | None:
    """Locate the failing yield (suspended frame), or the bail() or raise (traceback)."""
    if not get_config().capture_origin:
        return None
    if frame is not None:
        return Origin(code.co_filename, frame.f_lineno, code.co_name)
    lineno = None
    tb = signal.__traceback__
    while tb is not None:
        if tb.tb_frame.f_code is code:
            lineno = tb.tb_lineno
        tb = tb.tb_next
    if lineno is None:
        return None
    return Origin(code.co_filename, lineno, code.co_name)


def _short_circuit(kind: SequenceKind, signal: Propagate, frame: FrameType | None, code: CodeType) -> Any:
    origin = _origin(signal, frame, code)
    outcome = kind.failure(signal.value, origin)
    if get_config().log_level is not None:
        get_logger(__name__).debug(
            'sequence.short_circuit',
            kind=kind.name,
            failure=signal.value,
            origin=origin,
        )
    return outcome


def _flow_error(kind: SequenceKind, exc: FlowError, code: CodeType) -> Err[FlowError]:
    _mark(exc, _origin(exc, None, code))
    if get_config().log_level is not None:
        get_logger(__name__).debug('sequence.flow_error', kind=kind.name, error=exc, origin=exc.origin)
    return Err(exc)


def _mark(error: Any, origin: Origin | None) -> None:
    # the innermost sequence that saw the error wins
    if isinstance(error, FlowError) and error.origin is None:
        error.origin = origin


def _unwrap_step(value: Any) -> Any:
    return value.value if isinstance(value, Step) else value


# --- Drivers ---


def run(kind: SequenceKind, gen: Generator[Any, Any, Any]) -> Any:
    """Drive a sync generator to completion or to its first failure.

    Args:
        kind: OPTION, RESULT or FLOW.
        gen: A started-or-fresh generator object.

    Returns:
        ``kind.succeed(return value)`` or the failure outcome.

    Raises:
        TypeError: A step of the wrong kind, or an awaitable, was yielded.
    """
    if not inspect.isgenerator(gen):
        msg = f'{kind.name} sequence body must be a generator function, got {gen!r}'
        raise TypeError(msg)

    code = gen.gi_code
    try:
        yielded = next(gen)
        while True:
            value = _unwrap_step(yielded)
            if inspect.isawaitable(value):
                msg = f'{kind.name} sequence yielded an awaitable; use async_gen for async steps'
                raise TypeError(msg)
            yielded = gen.send(kind.resolve(value))
    except StopIteration as stop:
        return kind.succeed(stop.value)
    except Propagate as signal:
        return _short_circuit(kind, signal, gen.gi_frame, code)
    except FlowError as exc:
        if kind is not FLOW:
            raise
        return _flow_error(kind, exc, code)
    finally:
        gen.close()


async def run_async(kind: SequenceKind, agen: AsyncGenerator[Any, Any]) -> Any:
    """Drive an async generator to completion or to its first failure.

    Yielded awaitables (or ``step(awaitable)``) are awaited before being
    resolved. Async generators cannot return a value, so the payload of the
    last resolved step is the sequence's value (None if nothing was yielded).

    Args:
        kind: OPTION, RESULT or FLOW.
        agen: An async generator object.

    Returns:
        ``kind.succeed(last payload)`` or the failure outcome.
    """
    if not inspect.isasyncgen(agen):
        msg = f'{kind.name} sequence body must be an async generator function, got {agen!r}'
        raise TypeError(msg)

    code = agen.ag_code
    last: Any = None
    try:
        yielded = await agen.asend(None)
        while True:
            value = _unwrap_step(yielded)
            if inspect.isawaitable(value):
                value = await value
            last = kind.resolve(value)
            yielded = await agen.asend(last)
    except StopAsyncIteration:
        return kind.succeed(last)
    except Propagate as signal:
        return _short_circuit(kind, signal, agen.ag_frame, code)
    except FlowError as exc:
        if kind is not FLOW:
            raise
        return _flow_error(kind, exc, code)
    finally:
        await agen.aclose()
