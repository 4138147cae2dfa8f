"""Structured logging for klaw-flow.

The library only emits DEBUG events (for example when a sequence
short-circuits) and stays silent until logging is configured. Configuration
is scoped to the ``klaw_flow`` logger namespace: the root logger and the
global structlog configuration of the host application are left alone.

Records are rendered with structlog's ProcessorFormatter, either as JSON or
as console output.
"""

from __future__ import annotations

import functools
import logging
import sys
from typing import TYPE_CHECKING, Any

from klaw_flow.errors import Origin

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'LOGGER_NAME',
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'remove_log_hook',
]

LOGGER_NAME = 'klaw_flow'

# fields the engine passes as live objects
_RENDERED_FIELDS = ('failure', 'error', 'origin')


def _render_sequence_fields(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Turn the engine's containers, exceptions and origins into strings.

    ``failure`` and ``error`` become their repr, ``origin`` becomes
    ``file:line in function``. Plain strings and None are kept as they are.
    """
    for field in _RENDERED_FIELDS:
        value = event_dict.get(field)
        if value is None or isinstance(value, str):
            continue
        event_dict[field] = str(value) if isinstance(value, Origin) else repr(value)
    return event_dict


def _get_shared_processors() -> list[Any]:
    """Get processors shared between structlog and stdlib records."""
    import structlog

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        _render_sequence_fields,
        _create_hook_processor(),
    ]


def _get_structlog_processors() -> list[Any]:
    """Get the full processor chain for klaw-flow's own loggers."""
    import structlog

    return [
        structlog.stdlib.filter_by_level,
        *_get_shared_processors(),
        structlog.processors.StackInfoRenderer(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def _get_renderer(json_output: bool = True) -> Any:
    """Get the appropriate renderer based on output format."""
    import structlog

    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


class _FlowHandler(logging.StreamHandler):
    """The stderr handler configure_logging owns; replaced on reconfiguration."""


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
) -> None:
    """Attach a structlog-rendering handler to the ``klaw_flow`` logger.

    Calling it again replaces the handler from the previous call. Records
    don't propagate to the root logger, so nothing is emitted twice.

    Args:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
        json_output: If True, emit JSON logs. If False, use colored console output.
    """
    import structlog

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_get_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _get_renderer(json_output),
        ],
    )

    handler = _FlowHandler(sys.stderr)
    handler.setFormatter(formatter)

    flow_logger = logging.getLogger(LOGGER_NAME)
    for existing in flow_logger.handlers[:]:
        if isinstance(existing, _FlowHandler):
            flow_logger.removeHandler(existing)
    flow_logger.addHandler(handler)
    flow_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    flow_logger.propagate = False


@functools.cache
def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger bound to a stdlib logger under ``klaw_flow``.

    Args:
        name: Logger name. Defaults to ``klaw_flow``.

    Returns:
        A structlog BoundLogger running klaw-flow's processor chain.
    """
    import structlog

    return structlog.wrap_logger(
        logging.getLogger(name or LOGGER_NAME),
        processors=_get_structlog_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


# --- Logging Hooks ---

_log_hooks: list[Callable[[dict[str, Any]], None]] = []


def add_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Register a hook to be called for each log entry.

    Hooks receive a copy of the rendered event dict, e.g. to count
    short-circuits or forward them to an external sink.

    Args:
        hook: Callable that receives log entry dict.
    """
    _log_hooks.append(hook)


def remove_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Remove a previously registered log hook.

    Args:
        hook: The hook to remove.
    """
    if hook in _log_hooks:
        _log_hooks.remove(hook)


def clear_log_hooks() -> None:
    """Remove all registered log hooks."""
    _log_hooks.clear()


def _create_hook_processor() -> Callable[[Any, str, dict[str, Any]], dict[str, Any]]:
    """Create a processor that invokes log hooks."""

    def hook_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for hook in _log_hooks:
            try:
                hook(event_dict.copy())
            except Exception:
                pass  # hooks never break logging
        return event_dict

    return hook_processor
