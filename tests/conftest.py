"""Shared fixtures for klaw-flow tests."""

import pytest
from hypothesis import HealthCheck, settings
from klaw_flow import _config, clear_log_hooks

# fresh_config is autouse and function-scoped
settings.register_profile('klaw-flow', suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile('klaw-flow')


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Each test starts from default configuration and no log hooks."""
    for name in ('KLAW_FLOW_CAPTURE_ORIGIN', 'KLAW_FLOW_MAX_CONCURRENCY', 'KLAW_FLOW_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    _config.reset()
    clear_log_hooks()
    yield
    _config.reset()
    clear_log_hooks()


@pytest.fixture
def calls():
    """A list that test callables append to, for side-effect ordering checks."""
    return []
