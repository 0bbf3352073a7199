"""Tests for listener failure handling during emit."""

from __future__ import annotations

import pytest
from loguru import logger

from event_listener import EventListener, ListenerError
from tests.mocks import Exploding, Recorder


@pytest.fixture
def error_logs():
    """Capture loguru ERROR records."""
    messages: list = []
    sink_id = logger.add(messages.append, level="ERROR", format="{message}")
    yield messages
    logger.remove(sink_id)


class TestFailSoft:
    """Default policy: log the failure and keep going."""

    def test_failing_listener_does_not_stop_others(self, error_logs):
        # Arrange
        emitter = EventListener()
        bad = Exploding()
        good = Recorder()
        emitter.on("test", bad)
        emitter.on("test", good)

        # Act
        count = emitter.emit("test", 1)

        # Assert
        assert count == 2
        assert bad.calls == 1
        assert good.calls == [("test", 1)]
        assert len(error_logs) == 1
        assert "listener failed" in error_logs[0]
        assert "'test'" in error_logs[0]

    def test_every_failure_logged(self, error_logs):
        emitter = EventListener()
        emitter.on("test", Exploding(ValueError("first")))
        emitter.on("test", Exploding(KeyError("second")))

        assert emitter.emit("test", None) == 2
        assert len(error_logs) == 2

    def test_failing_listener_stays_registered(self, error_logs):
        emitter = EventListener()
        bad = Exploding()
        emitter.on("test", bad)
        emitter.emit("test", 1)
        emitter.emit("test", 2)
        assert bad.calls == 2


class TestFailFast:
    """fail_fast=True stops the pass at the first failure."""

    def test_failure_raises_listener_error(self):
        # Arrange
        emitter = EventListener(fail_fast=True)
        cause = RuntimeError("boom")
        bad = Exploding(cause)
        after = Recorder()
        emitter.on("test", bad)
        emitter.on("test", after)

        # Act
        with pytest.raises(ListenerError) as exc_info:
            emitter.emit("test", 1)

        # Assert
        err = exc_info.value
        assert err.original_error is cause
        assert err.__cause__ is cause
        assert err.event_name == "test"
        assert err.listener.callback is bad
        assert err.code == "listener_failed"
        assert after.calls == []

    def test_listeners_before_failure_ran(self):
        emitter = EventListener(fail_fast=True)
        before = Recorder()
        emitter.on("test", before)
        emitter.on("test", Exploding())

        with pytest.raises(ListenerError):
            emitter.emit("test", 1)
        assert before.calls == [("test", 1)]

    def test_policy_can_be_switched_at_runtime(self, error_logs):
        emitter = EventListener()
        emitter.on("test", Exploding())
        assert emitter.emit("test", 1) == 1

        emitter.fail_fast = True
        with pytest.raises(ListenerError):
            emitter.emit("test", 2)

    def test_registry_usable_after_failure(self):
        emitter = EventListener(fail_fast=True)
        bad = Exploding()
        emitter.on("test", bad)
        with pytest.raises(ListenerError):
            emitter.emit("test", 1)

        emitter.remove_listener("test", bad)
        emitter.on("test", Recorder())
        assert emitter.emit("test", 2) == 1
