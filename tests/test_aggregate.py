"""Tests for the aggregation primitives and their async forms."""

import inspect

import anyio
import pytest
from klaw_flow import AsyncOption, AsyncResult, Err, Nothing, Ok, Option, Result, Some, init
from klaw_flow.aggregate import gather, run_validators


async def delayed(value, delay):
    await anyio.sleep(delay)
    return value


class TestRunValidators:
    """Tests for run_validators."""

    def test_returns_errors_in_order(self):
        """Errors are returned in validator order."""
        validators = [lambda _: Err('a'), lambda _: Ok(True), lambda _: Err('b')]
        assert run_validators(1, validators) == ['a', 'b']

    def test_no_errors(self):
        """No failures gives an empty list."""
        assert run_validators(1, [lambda _: Ok(True)]) == []


class TestGather:
    """Tests for gather."""

    async def test_preserves_input_order(self):
        """Values come back in input order regardless of completion order."""
        values = await gather([delayed(1, 0.03), delayed(2, 0.0), delayed(3, 0.01)])
        assert values == [1, 2, 3]

    async def test_empty(self):
        """No awaitables gives an empty list."""
        assert await gather([]) == []

    async def test_rejects_non_positive_limit(self):
        """limit must be positive."""
        with pytest.raises(ValueError, match='limit must be positive'):
            await gather([], limit=0)

    async def test_configured_limit(self):
        """The configured max_concurrency bounds gather when no limit is passed."""
        init(max_concurrency=1)
        running = 0
        peak = 0

        async def tracked(n):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await anyio.sleep(0.005)
            running -= 1
            return n

        assert await gather([tracked(i) for i in range(4)]) == [0, 1, 2, 3]
        assert peak == 1

    async def test_reraises_original_exception(self):
        """A failing awaitable surfaces its own exception, not an ExceptionGroup."""

        async def broken():
            raise KeyError('missing')

        with pytest.raises(KeyError, match='missing'):
            await gather([delayed(1, 0.01), broken()])

    async def test_earliest_failure_wins(self):
        """When several awaitables fail, the one earliest in input order is raised."""

        async def fail(exc):
            raise exc

        with pytest.raises(ValueError, match='first'):
            await gather([fail(ValueError('first')), fail(TypeError('second'))])

    async def test_failure_cancels_the_rest(self, calls):
        """Pending awaitables are cancelled once one fails."""

        async def slow():
            await anyio.sleep(1)
            calls.append('finished')

        async def broken():
            raise RuntimeError('boom')

        with pytest.raises(RuntimeError):
            await gather([slow(), broken()])
        assert calls == []


class TestOptionAsyncAggregation:
    """Tests for Option.all_async and Option.any_async."""

    async def test_all_async(self):
        """all_async resolves concurrently and keeps input order."""
        result = await Option.all_async(delayed(Some(1), 0.02), delayed(Some(2), 0.0))
        assert result == Some([1, 2])

    async def test_all_async_with_nothing(self):
        """Any Nothing makes all_async Nothing."""
        assert await Option.all_async(delayed(Some(1), 0.0), delayed(Nothing, 0.0)) is Nothing

    async def test_all_async_empty(self):
        """No awaitables gives Some([])."""
        assert await Option.all_async() == Some([])

    async def test_any_async_stops_at_first_some(self, calls):
        """any_async awaits in order and never awaits past the first Some."""

        async def make(value):
            calls.append(value)
            return value

        result = await Option.any_async(make(Nothing), make(Some(2)), make(Some(3)))
        assert result == Some(2)
        assert calls == [Nothing, Some(2)]

    async def test_any_async_all_nothing(self):
        """any_async is Nothing when every input is Nothing."""
        assert await Option.any_async(delayed(Nothing, 0.0)) is Nothing


class TestResultAsyncAggregation:
    """Tests for Result.all_async and Result.any_async."""

    async def test_all_async_collects_errors_in_input_order(self):
        """Errors are reported in input order, not completion order."""
        result = await Result.all_async(
            delayed(Err('slow'), 0.02),
            delayed(Ok(1), 0.0),
            delayed(Err('fast'), 0.0),
        )
        assert result == Err(['slow', 'fast'])

    async def test_all_async_ok(self):
        """all_async collects Ok values."""
        assert await Result.all_async(delayed(Ok(1), 0.01), delayed(Ok(2), 0.0), limit=1) == Ok([1, 2])

    async def test_any_async(self):
        """any_async returns the first Ok in input order."""
        assert await Result.any_async(delayed(Err('a'), 0.0), delayed(Ok(2), 0.0)) == Ok(2)
        assert await Result.any_async(delayed(Err('a'), 0.0), delayed(Err('b'), 0.0)) == Err(['a', 'b'])

    async def test_all_async_raises_original_exception(self):
        """An awaitable that raises propagates its exception unchanged."""

        async def broken():
            raise KeyError('k')

        with pytest.raises(KeyError):
            await Result.all_async(delayed(Ok(1), 0.0), broken())

    async def test_any_async_closes_skipped_chains(self):
        """Chains after the first Ok are closed down to the coroutine they started from."""
        root = delayed(Ok(2), 0.0)
        skipped = AsyncResult(root).map(str)
        assert await Result.any_async(delayed(Ok(1), 0.0), skipped) == Ok(1)
        assert inspect.getcoroutinestate(root) == inspect.CORO_CLOSED


class TestClosePending:
    """Tests for closing awaitables that are never awaited."""

    async def test_option_chain_closed(self):
        """Option.any_async closes a skipped AsyncOption and its source coroutine."""
        root = delayed(Some(2), 0.0)
        skipped = AsyncOption(root).map(lambda x: x + 1).filter(bool)
        assert await Option.any_async(delayed(Some(1), 0.0), skipped) == Some(1)
        assert inspect.getcoroutinestate(root) == inspect.CORO_CLOSED

    async def test_plain_coroutine_closed(self):
        """Skipped bare coroutines are closed too."""
        skipped = delayed(Some(3), 0.0)
        assert await Option.any_async(delayed(Some(1), 0.0), skipped) == Some(1)
        assert inspect.getcoroutinestate(skipped) == inspect.CORO_CLOSED
