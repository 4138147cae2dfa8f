"""Decorators: @do, @result, @safe and their async variants."""

from klaw_flow.decorators.do import do, do_async
from klaw_flow.decorators.result import result
from klaw_flow.decorators.safe import safe, safe_async

__all__ = [
    'do',
    'do_async',
    'result',
    'safe',
    'safe_async',
]
