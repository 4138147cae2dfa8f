"""Tests for structured logging and log hooks."""

import logging

import pytest
from klaw_flow import (
    Err,
    Flow,
    FlowError,
    Nothing,
    Origin,
    Result,
    Some,
    add_log_hook,
    configure_logging,
    init,
    remove_log_hook,
)
from klaw_flow._logging import LOGGER_NAME, _create_hook_processor, _render_sequence_fields


@pytest.fixture
def restore_flow_logger():
    """Undo what configure_logging does to the klaw_flow logger."""
    flow_logger = logging.getLogger(LOGGER_NAME)
    handlers = flow_logger.handlers[:]
    level = flow_logger.level
    propagate = flow_logger.propagate
    yield flow_logger
    flow_logger.handlers[:] = handlers
    flow_logger.setLevel(level)
    flow_logger.propagate = propagate


class TestHookProcessor:
    """Tests for the hook processor."""

    def test_hooks_receive_copy(self):
        """Hooks get a copy of the event dict."""
        seen = []
        add_log_hook(seen.append)
        processor = _create_hook_processor()
        event = {'event': 'x'}
        assert processor(None, 'debug', event) is event
        assert seen == [{'event': 'x'}]
        assert seen[0] is not event

    def test_failing_hook_does_not_break_logging(self):
        """An exception in a hook is contained."""

        def bad_hook(_event):
            raise RuntimeError('hook failed')

        seen = []
        add_log_hook(bad_hook)
        add_log_hook(seen.append)
        processor = _create_hook_processor()
        processor(None, 'info', {'event': 'y'})
        assert seen == [{'event': 'y'}]

    def test_remove_hook(self):
        """Removed hooks are no longer called."""
        seen = []
        add_log_hook(seen.append)
        remove_log_hook(seen.append)
        remove_log_hook(seen.append)
        _create_hook_processor()(None, 'info', {'event': 'z'})
        assert seen == []


class TestSequenceEvents:
    """Tests for the DEBUG events emitted by the engine."""

    def test_short_circuit_event(self, restore_flow_logger):
        """A short-circuit emits sequence.short_circuit with kind and origin."""
        init(log_level='DEBUG', json_logs=True)
        events = []
        add_log_hook(events.append)

        def body():
            yield Some(1)
            yield Nothing

        Flow.gen(body)
        short_circuits = [e for e in events if e.get('event') == 'sequence.short_circuit']
        assert len(short_circuits) == 1
        assert short_circuits[0]['kind'] == 'flow'
        assert short_circuits[0]['failure'] == 'Nothing'
        assert 'body' in short_circuits[0]['origin']

    def test_flow_error_event(self, restore_flow_logger):
        """A raised FlowError emits sequence.flow_error."""
        init(log_level='DEBUG')
        events = []
        add_log_hook(events.append)

        def body():
            yield Some(1)
            raise FlowError('stop')

        Flow.gen(body)
        assert any(e.get('event') == 'sequence.flow_error' for e in events)

    def test_silent_without_log_level(self):
        """Nothing is logged unless a log level is configured."""
        events = []
        add_log_hook(events.append)

        def body():
            yield Err('e')

        assert Result.gen(body) == Err('e')
        assert events == []

    def test_flow_error_event_carries_origin(self, restore_flow_logger):
        """sequence.flow_error reports where the FlowError was raised."""
        init(log_level='DEBUG')
        events = []
        add_log_hook(events.append)

        def body():
            yield Some(1)
            raise FlowError('stop')

        Flow.gen(body)
        (event,) = [e for e in events if e.get('event') == 'sequence.flow_error']
        assert event['error'] == "FlowError('stop')"
        assert 'body' in event['origin']


class TestRenderSequenceFields:
    """Tests for the processor that renders engine fields."""

    def test_renders_objects(self):
        """Containers and exceptions become reprs, origins become file:line strings."""
        event = _render_sequence_fields(
            None,
            'debug',
            {
                'event': 'sequence.short_circuit',
                'failure': Err('boom'),
                'error': KeyError('k'),
                'origin': Origin('app.py', 12, 'load'),
            },
        )
        assert event['failure'] == "Err('boom')"
        assert event['error'] == "KeyError('k')"
        assert event['origin'] == 'app.py:12 in load'

    def test_leaves_strings_and_none(self):
        """Already-rendered and missing values are untouched."""
        event = _render_sequence_fields(None, 'info', {'event': 'x', 'failure': 'Nothing', 'origin': None})
        assert event == {'event': 'x', 'failure': 'Nothing', 'origin': None}


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_root_logger_untouched(self, restore_flow_logger):
        """The application's root handlers and level survive configuration."""
        root = logging.getLogger()
        handlers = root.handlers[:]
        level = root.level
        configure_logging('DEBUG')
        assert root.handlers == handlers
        assert root.level == level

    def test_scoped_to_flow_logger(self, restore_flow_logger):
        """The handler sits on the klaw_flow logger, which stops propagating."""
        configure_logging('WARNING', json_output=False)
        assert restore_flow_logger.level == logging.WARNING
        assert restore_flow_logger.propagate is False
        assert len(restore_flow_logger.handlers) == 1

    def test_reconfigure_replaces_handler(self, restore_flow_logger):
        """Calling configure_logging twice leaves a single handler behind."""
        configure_logging('INFO')
        first = restore_flow_logger.handlers[-1]
        configure_logging('DEBUG')
        assert first not in restore_flow_logger.handlers
        assert restore_flow_logger.level == logging.DEBUG

    def test_other_handlers_kept(self, restore_flow_logger):
        """Handlers someone else attached to klaw_flow stay in place."""
        mine = logging.NullHandler()
        restore_flow_logger.addHandler(mine)
        configure_logging('INFO')
        assert mine in restore_flow_logger.handlers

    def test_below_level_skips_hooks(self, restore_flow_logger):
        """Events under the configured level never reach the hooks."""
        init(log_level='INFO')
        events = []
        add_log_hook(events.append)

        def body():
            yield Nothing

        Flow.gen(body)
        assert events == []
