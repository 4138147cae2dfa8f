"""Aggregation primitives shared by Option and Result.

``all`` collects payloads and stops at (Option) or reports every (Result)
failure, ``any`` picks the first success, and ``run_validators`` runs every
validator without short-circuiting. The async variants resolve awaitables
concurrently with anyio, optionally bounded by an aiologic CapacityLimiter,
and store outcomes by index so aggregation order is always input order.

Example:
    ```python
    async def example():
        result = await all_results_async([fetch(i) for i in range(10)], limit=3)
    ```
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import aiologic
import anyio

from klaw_flow._config import get_config
from klaw_flow.async_.option import AsyncOption
from klaw_flow.async_.result import AsyncResult
from klaw_flow.option import Nothing, Option, Some
from klaw_flow.result import Err, Ok, Result

__all__ = [
    'all_options',
    'all_options_async',
    'all_results',
    'all_results_async',
    'any_option',
    'any_option_async',
    'any_result',
    'any_result_async',
    'gather',
    'run_validators',
    'run_validators_async',
]


# --- Sync ---


def all_options(options: Iterable[Option[Any]]) -> Option[list[Any]]:
    """Some of every payload if all are Some; stops at the first Nothing."""
    values: list[Any] = []
    for option in options:
        if not isinstance(option, Some):
            return Nothing
        values.append(option.value)
    return Some(values)


def any_option(options: Iterable[Option[Any]]) -> Option[Any]:
    """First Some in input order, else Nothing."""
    for option in options:
        if isinstance(option, Some):
            return option
    return Nothing


def all_results(results: Iterable[Result[Any, Any]]) -> Result[list[Any], list[Any]]:
    """Ok of every value, or Err of every error in input order.

    Args:
        results: Results to aggregate. All of them are inspected.

    Returns:
        Ok(values) if there is no Err, otherwise Err(errors).
    """
    values: list[Any] = []
    errors: list[Any] = []
    for result in results:
        if isinstance(result, Ok):
            values.append(result.value)
        else:
            errors.append(result.error)
    if errors:
        return Err(errors)
    return Ok(values)


def any_result(results: Iterable[Result[Any, Any]]) -> Result[Any, list[Any]]:
    """First Ok in input order, else Err of every error."""
    errors: list[Any] = []
    for result in results:
        if isinstance(result, Ok):
            return result
        errors.append(result.error)
    return Err(errors)


def run_validators[T](value: T, validators: Iterable[Callable[[T], Result[Any, Any]]]) -> list[Any]:
    """Run every validator against value and return the errors in validator order."""
    errors: list[Any] = []
    for validator in validators:
        outcome = validator(value)
        if isinstance(outcome, Err):
            errors.append(outcome.error)
    return errors


# --- Async ---


async def gather[T](awaitables: Iterable[Awaitable[T]], *, limit: int | None = None) -> list[T]:
    """Await all awaitables concurrently and return their values in input order.

    Note:
        The awaitables iterable is eagerly materialized into a list before
        processing. The first exception cancels the remaining awaitables and is
        re-raised as-is, not wrapped in an ExceptionGroup. When several fail
        before cancellation lands, the one earliest in input order wins.

    Args:
        awaitables: Awaitables to resolve.
        limit: Maximum number of concurrent operations. None falls back to the
            configured max_concurrency (unbounded by default).

    Returns:
        The resolved values, in the order the awaitables were given.
    """
    if limit is None:
        limit = get_config().max_concurrency
    elif limit < 1:
        msg = f'limit must be positive, got {limit}'
        raise ValueError(msg)

    limiter = aiologic.CapacityLimiter(limit) if limit is not None else None
    awaitable_list = list(awaitables)
    results: list[Any] = [None] * len(awaitable_list)
    errors: dict[int, Exception] = {}

    async with anyio.create_task_group() as tg:

        async def run_one(i: int, aw: Awaitable[T]) -> None:
            try:
                if limiter is None:
                    results[i] = await aw
                else:
                    async with limiter:
                        results[i] = await aw
            except Exception as exc:
                errors[i] = exc
                tg.cancel_scope.cancel()
            finally:
                # cancelled before it ever started
                _close_pending([aw])

        for i, aw in enumerate(awaitable_list):
            tg.start_soon(run_one, i, aw)

    if errors:
        raise errors[min(errors)]
    return results


def _close_pending(awaitables: list[Awaitable[Any]]) -> None:
    for aw in awaitables:
        if isinstance(aw, AsyncOption | AsyncResult) or inspect.iscoroutine(aw):
            aw.close()


async def all_options_async(
    awaitables: Iterable[Awaitable[Option[Any]]],
    *,
    limit: int | None = None,
) -> Option[list[Any]]:
    """Resolve awaitables concurrently, then apply ``all_options`` in input order."""
    return all_options(await gather(awaitables, limit=limit))


async def any_option_async(awaitables: Iterable[Awaitable[Option[Any]]]) -> Option[Any]:
    """Await in input order and return the first Some.

    Awaitables after the first Some are never awaited; pending coroutines are
    closed so they don't warn about never being awaited.
    """
    pending = list(awaitables)
    for i, aw in enumerate(pending):
        option = await aw
        if isinstance(option, Some):
            _close_pending(pending[i + 1 :])
            return option
    return Nothing


async def all_results_async(
    awaitables: Iterable[Awaitable[Result[Any, Any]]],
    *,
    limit: int | None = None,
) -> Result[list[Any], list[Any]]:
    """Resolve awaitables concurrently, then apply ``all_results`` in input order.

    Example:
        ```python
        async def fetch(id: int) -> Result[dict, str]:
            await anyio.sleep(0.01)
            return Ok({'id': id})

        async def example():
            result = await all_results_async([fetch(i) for i in range(10)], limit=3)
            assert result.is_ok()
        ```
    """
    return all_results(await gather(awaitables, limit=limit))


async def any_result_async(awaitables: Iterable[Awaitable[Result[Any, Any]]]) -> Result[Any, list[Any]]:
    """Await in input order and return the first Ok, else Err of every error."""
    pending = list(awaitables)
    errors: list[Any] = []
    for i, aw in enumerate(pending):
        result = await aw
        if isinstance(result, Ok):
            _close_pending(pending[i + 1 :])
            return result
        errors.append(result.error)
    return Err(errors)


async def run_validators_async[T](
    value: T,
    validators: Iterable[Callable[[T], Awaitable[Result[Any, Any]]]],
    *,
    limit: int | None = None,
) -> list[Any]:
    """Run async validators concurrently and return the errors in validator order.

    The outcome is the same as running them one after another.
    """
    outcomes = await gather((validator(value) for validator in validators), limit=limit)
    return [outcome.error for outcome in outcomes if isinstance(outcome, Err)]
