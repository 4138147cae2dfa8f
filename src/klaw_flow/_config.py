"""Library configuration: FlowConfig, initialization, and environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from klaw_flow._logging import configure_logging

__all__ = [
    'FlowConfig',
    'get_config',
    'init',
    'reset',
]

_TRUE = frozenset({'1', 'true', 'yes', 'on'})
_FALSE = frozenset({'0', 'false', 'no', 'off'})


@dataclass(frozen=True)
class FlowConfig:
    """Configuration for klaw-flow.

    Attributes:
        capture_origin: Record the file/line of the yield that short-circuits a
            sequence and attach it to the AbsenceError it produces.
        max_concurrency: Upper bound on concurrently running awaitables in
            async aggregation (validate_async, all_async). None = unbounded.
        log_level: Logging level (e.g., "DEBUG"). None = silent.
        json_logs: Render logs as JSON (True) or colored console output (False).
    """

    capture_origin: bool = True
    max_concurrency: int | None = None
    log_level: str | None = None
    json_logs: bool = True


# Global configuration (set by init(), lazily created by get_config())
_config: FlowConfig | None = None


def _env_capture_origin() -> bool | None:
    raw = os.environ.get('KLAW_FLOW_CAPTURE_ORIGIN', '').strip().lower()
    if not raw:
        return None
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    logging.warning("Unknown KLAW_FLOW_CAPTURE_ORIGIN value '%s', ignoring", raw)
    return None


def _env_max_concurrency() -> int | None:
    raw = os.environ.get('KLAW_FLOW_MAX_CONCURRENCY', '').strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logging.warning("Invalid KLAW_FLOW_MAX_CONCURRENCY value '%s', ignoring", raw)
        return None
    if value < 1:
        logging.warning('KLAW_FLOW_MAX_CONCURRENCY must be positive, got %d; ignoring', value)
        return None
    return value


def _env_log_level() -> str | None:
    raw = os.environ.get('KLAW_FLOW_LOG_LEVEL', '').strip().upper()
    return raw or None


def init(
    capture_origin: bool | None = None,
    max_concurrency: int | None = None,
    log_level: str | None = None,
    *,
    json_logs: bool = True,
) -> FlowConfig:
    """Initialize klaw-flow with the given configuration.

    Arguments left as None fall back to the environment
    (KLAW_FLOW_CAPTURE_ORIGIN, KLAW_FLOW_MAX_CONCURRENCY, KLAW_FLOW_LOG_LEVEL),
    then to the FlowConfig defaults.

    Args:
        capture_origin: Attach yield locations to absence errors.
        max_concurrency: Default concurrency limit for async aggregation.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.
        json_logs: Emit JSON logs when logging is configured.

    Returns:
        The FlowConfig that was set.

    Example:
        ```python
        from klaw_flow import init

        init(log_level='DEBUG', json_logs=False)
        ```
    """
    global _config  # noqa: PLW0603

    if capture_origin is None:
        capture_origin = _env_capture_origin()
    if max_concurrency is None:
        max_concurrency = _env_max_concurrency()
    elif max_concurrency < 1:
        msg = f'max_concurrency must be positive, got {max_concurrency}'
        raise ValueError(msg)
    if log_level is None:
        log_level = _env_log_level()

    _config = FlowConfig(
        capture_origin=True if capture_origin is None else capture_origin,
        max_concurrency=max_concurrency,
        log_level=log_level,
        json_logs=json_logs,
    )

    if log_level is not None:
        configure_logging(log_level, json_output=json_logs)

    return _config


def get_config() -> FlowConfig:
    """Get the current configuration, initializing from the environment if needed.

    Returns:
        The current FlowConfig.
    """
    if _config is None:
        return init()
    return _config


def reset() -> None:
    """Forget the current configuration; the next get_config() re-reads the environment."""
    global _config  # noqa: PLW0603
    _config = None
