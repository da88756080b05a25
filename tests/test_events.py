"""Tests for pi.reader.events.EventBus."""

from __future__ import annotations

from typing import Any

import pytest

from pi.reader.events import EventBus, KeyListener


class Recorder:
    """Listener object collecting every event it handles."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def handle(self, event_name: str, event: Any) -> None:
        self.events.append((event_name, event))


class TestEventBusHandlers:
    """Named event handlers."""

    def test_named_handler_only_sees_its_event(self) -> None:
        bus = EventBus()
        seen = []
        bus.on("keyup", seen.append)
        bus.publish("keyup", 1)
        bus.publish("keydown", 2)
        assert seen == [1]

    def test_handlers_run_in_registration_order(self) -> None:
        bus = EventBus()
        order = []
        bus.on("keypress", lambda e: order.append("first"))
        bus.on("keypress", lambda e: order.append("second"))
        bus.publish("keypress", None)
        assert order == ["first", "second"]

    def test_on_returns_unsubscribe(self) -> None:
        bus = EventBus()
        seen = []
        off = bus.on("keyup", seen.append)
        off()
        off()
        bus.publish("keyup", 1)
        assert seen == []
        assert len(bus) == 0

    def test_unsubscribe_by_handler(self) -> None:
        bus = EventBus()
        seen = []

        def handler(event: Any) -> None:
            seen.append(event)

        bus.on("a", handler)
        bus.on("b", seen.append)
        bus.unsubscribe(handler)
        bus.publish("a", 1)
        bus.publish("b", 2)
        assert seen == [2]

    def test_handler_may_unsubscribe_during_publish(self) -> None:
        bus = EventBus()
        seen = []

        def once(event: Any) -> None:
            seen.append(event)
            off()

        off = bus.on("tick", once)
        bus.on("tick", lambda e: seen.append("other"))
        bus.publish("tick", 1)
        bus.publish("tick", 2)
        assert seen == [1, "other", "other"]

    def test_handler_errors_propagate(self) -> None:
        bus = EventBus()

        def boom(event: Any) -> None:
            raise RuntimeError("boom")

        bus.on("tick", boom)
        with pytest.raises(RuntimeError):
            bus.publish("tick", None)


class TestEventBusListeners:
    """Listener objects receiving every event."""

    def test_listener_receives_all_events(self) -> None:
        bus = EventBus()
        recorder = Recorder()
        assert isinstance(recorder, KeyListener)
        bus.subscribe(recorder)
        bus.publish("keyup", 1)
        bus.publish("keypress", 2)
        assert recorder.events == [("keyup", 1), ("keypress", 2)]

    def test_unsubscribe_listener(self) -> None:
        bus = EventBus()
        recorder = Recorder()
        bus.subscribe(recorder)
        bus.unsubscribe(recorder)
        bus.publish("keyup", 1)
        assert recorder.events == []

    def test_subscribed_block(self) -> None:
        bus = EventBus()
        recorder = Recorder()
        with bus.subscribed(recorder) as listener:
            assert listener is recorder
            bus.publish("inside", 1)
        bus.publish("outside", 2)
        assert recorder.events == [("inside", 1)]

    def test_rejects_objects_without_handle(self) -> None:
        with pytest.raises(TypeError):
            EventBus().subscribe(object())  # type: ignore[arg-type]

    def test_clear(self) -> None:
        bus = EventBus()
        bus.subscribe(Recorder())
        bus.on("x", print)
        bus.clear()
        assert len(bus) == 0
