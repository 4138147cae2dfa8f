"""Flow: one sequence mixing Option and Result steps.

Every outcome is a Result. Nothing becomes ``Err(AbsenceError(...))``, Err
passes through, and a ``FlowError`` that is yielded or raised inside the body
becomes ``Err(error)``.

Example:
    ```python
    from klaw_flow import Flow, Option, Result

    def body():
        user = yield Option.from_nullable(users.get(user_id))
        profile = yield load_profile(user)  # Result
        return profile.display_name

    Flow.gen(body)  # Ok(...), Err(AbsenceError(...)) or the Err from load_profile
    ```
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

from klaw_flow.engine import FLOW, FlowAdapter, run, run_async
from klaw_flow.result import Result

__all__ = ['Flow']


class Flow:
    """Entry points for mixed Option/Result sequences."""

    __slots__ = ()

    @staticmethod
    def gen[R](body: Callable[[], Generator[Any, Any, R]]) -> Result[R, Any]:
        """Run a generator yielding Options, Results or FlowErrors.

        Args:
            body: Zero-argument generator function.

        Returns:
            Ok(return value) or the first failure as an Err.
        """
        return run(FLOW, body())

    @staticmethod
    def gen_adapter[R](body: Callable[[FlowAdapter], Generator[Any, Any, R]]) -> Result[R, Any]:
        """Adapter discipline: ``yield step(container)`` and ``yield step.fail(error)``."""
        return run(FLOW, body(FlowAdapter()))

    @staticmethod
    async def async_gen(body: Callable[[], AsyncGenerator[Any, Any]]) -> Result[Any, Any]:
        """Async ``gen``; yielded awaitables are awaited, the last payload is the result."""
        return await run_async(FLOW, body())

    @staticmethod
    async def async_gen_adapter(body: Callable[[FlowAdapter], AsyncGenerator[Any, Any]]) -> Result[Any, Any]:
        """Async ``gen_adapter``."""
        return await run_async(FLOW, body(FlowAdapter()))
