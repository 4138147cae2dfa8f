"""Tests for Flow: mixed Option/Result sequences."""

import inspect

import pytest
from klaw_flow import AbsenceError, Err, Flow, FlowError, Nothing, Ok, Option, Result, Some, UnwrappedNone, init


class ValidationError(FlowError):
    pass


class TestFlowGen:
    """Tests for Flow.gen."""

    def test_mixed_success(self):
        """Option and Result steps unwrap in the same body."""

        def body():
            a = yield Some(2)
            b = yield Ok(3)
            return a * b

        assert Flow.gen(body) == Ok(6)

    def test_nothing_becomes_absence_error(self):
        """Nothing short-circuits to Err(AbsenceError)."""

        def body():
            yield Ok(1)
            yield Nothing
            return 'unreachable'

        result = Flow.gen(body)
        assert result.is_err()
        assert isinstance(result.unwrap_err(), AbsenceError)
        assert AbsenceError is UnwrappedNone

    def test_err_passes_through(self):
        """Err payloads are returned unchanged."""

        def body():
            yield Some(1)
            yield Err('db down')

        assert Flow.gen(body) == Err('db down')

    def test_yielded_flow_error(self):
        """Yielding a FlowError aborts with Err(error)."""

        def body():
            value = yield Some(-5)
            if value < 0:
                yield ValidationError('Value must be positive')
            return value * 2

        result = Flow.gen(body)
        assert isinstance(result.unwrap_err(), ValidationError)
        assert str(result.unwrap_err()) == 'Value must be positive'

    def test_raised_flow_error(self):
        """Raising a FlowError inside the body also becomes Err(error)."""
        error = ValidationError('bad')

        def body():
            yield Some(1)
            raise error

        assert Flow.gen(body) == Err(error)

    def test_other_exceptions_propagate(self):
        """Non-FlowError exceptions escape unchanged."""

        def body():
            yield Some(1)
            raise RuntimeError('bug')

        with pytest.raises(RuntimeError, match='bug'):
            Flow.gen(body)

    def test_bail_inside_try_catch(self):
        """bail() inside Result.try_catch still short-circuits the flow."""

        def body():
            yield Some(1)
            value = yield Result.try_catch(lambda: Nothing.bail())
            return value

        assert isinstance(Flow.gen(body).unwrap_err(), AbsenceError)

    def test_err_bail_inside_try_catch(self):
        """An Err bailed inside Result.try_catch is the flow's outcome, not a caught exception."""

        def body():
            value = yield Result.try_catch(lambda: Err('inner').bail())
            return value

        assert Flow.gen(body) == Err('inner')

    def test_adapter_fail(self):
        """step.fail(error) aborts with Err(error)."""

        def body(step):
            a = yield step(Some(1))
            b = yield step(Ok(2))
            if a + b > 2:
                yield step.fail('too big')
            return a + b

        assert Flow.gen_adapter(body) == Err('too big')

    def test_unsupported_yield(self):
        """Yielding a plain value is a TypeError."""

        def body():
            yield 42

        with pytest.raises(TypeError, match='flow sequence'):
            Flow.gen(body)


class TestOrigin:
    """Tests for origin capture on absence errors."""

    def test_origin_points_at_failing_yield(self):
        """The AbsenceError records the line of the yield that saw Nothing."""

        def body():
            yield Some(1)
            yield Option.from_nullable(None)

        lineno = inspect.getsourcelines(body)[1] + 2
        error = Flow.gen(body).unwrap_err()
        assert error.origin is not None
        assert error.origin.lineno == lineno
        assert error.origin.function == 'body'
        assert error.origin.filename == __file__
        assert f'{__file__}:{lineno}' in str(error)

    def test_origin_of_bail(self):
        """bail() inside the body records the bail() call site."""

        def body():
            yield Some(1)
            Nothing.bail()

        lineno = inspect.getsourcelines(body)[1] + 2
        error = Flow.gen(body).unwrap_err()
        assert error.origin is not None
        assert error.origin.lineno == lineno

    def test_origin_capture_disabled(self):
        """capture_origin=False leaves origin unset."""
        init(capture_origin=False)

        def body():
            yield Nothing

        assert Flow.gen(body).unwrap_err().origin is None

    def test_origin_of_yielded_flow_error(self):
        """A yielded FlowError records the yield that aborted the flow."""

        def body():
            yield Some(1)
            yield ValidationError('rejected')

        lineno = inspect.getsourcelines(body)[1] + 2
        error = Flow.gen(body).unwrap_err()
        assert error.origin is not None
        assert error.origin.lineno == lineno
        assert error.origin.function == 'body'

    def test_origin_of_raised_flow_error(self):
        """A raised FlowError records the raise statement."""

        def body():
            yield Some(1)
            raise ValidationError('rejected')

        lineno = inspect.getsourcelines(body)[1] + 2
        assert Flow.gen(body).unwrap_err().origin.lineno == lineno

    def test_flow_error_keeps_innermost_origin(self):
        """A FlowError passed up through an outer flow keeps the inner location."""

        def inner():
            yield ValidationError('deep')

        def outer():
            value = yield Flow.gen(inner)
            return value

        lineno = inspect.getsourcelines(inner)[1] + 1
        error = Flow.gen(outer).unwrap_err()
        assert error.origin.function == 'inner'
        assert error.origin.lineno == lineno

    def test_flow_error_origin_capture_disabled(self):
        """capture_origin=False leaves FlowError.origin unset."""
        init(capture_origin=False)

        def body():
            yield ValidationError('x')

        assert Flow.gen(body).unwrap_err().origin is None

    def test_absence_errors_compare_by_type(self):
        """Absence errors are equal regardless of origin."""

        def body():
            yield Nothing

        assert Flow.gen(body) == Err(AbsenceError())


class TestFlowAsync:
    """Tests for Flow.async_gen."""

    async def test_mixed_awaitables(self):
        """Awaitables of Options and Results are resolved in order."""

        async def user(uid):
            return Option.from_nullable({1: 'ada'}.get(uid))

        async def greeting(name):
            return Ok(f'hello {name}')

        async def body():
            name = yield user(1)
            yield greeting(name)

        assert await Flow.async_gen(body) == Ok('hello ada')

    async def test_absence_in_async(self):
        """Nothing in an async flow becomes an AbsenceError."""

        async def body():
            yield Some(1)
            yield Nothing

        result = await Flow.async_gen(body)
        assert isinstance(result.unwrap_err(), AbsenceError)

    async def test_raised_flow_error_in_async(self):
        """FlowErrors raised in async bodies become Err."""

        async def body():
            yield Some(1)
            raise ValidationError('async bad')

        result = await Flow.async_gen(body)
        assert isinstance(result.unwrap_err(), ValidationError)

    async def test_async_adapter(self):
        """Async adapter sequences can abort directly."""

        async def body(step):
            yield step(Ok(1))
            yield step.fail(ValidationError('stop'))

        result = await Flow.async_gen_adapter(body)
        assert isinstance(result.unwrap_err(), ValidationError)

    async def test_bail_inside_try_async_catch(self):
        """bail() inside Result.try_async_catch still short-circuits the flow."""

        async def lookup():
            return Nothing.bail()

        async def body():
            yield Some(1)
            yield Result.try_async_catch(lookup)

        result = await Flow.async_gen(body)
        assert isinstance(result.unwrap_err(), AbsenceError)
