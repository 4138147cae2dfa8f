"""Deferred, chainable containers for async code."""

from klaw_flow.async_.option import AsyncOption
from klaw_flow.async_.result import AsyncResult

__all__ = ['AsyncOption', 'AsyncResult']
