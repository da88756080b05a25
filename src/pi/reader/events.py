"""Synchronous in-process publish/subscribe for reader events."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Protocol, runtime_checkable

EventHandler = Callable[[Any], None]


@runtime_checkable
class KeyListener(Protocol):
    """Listener object receiving every published event."""

    def handle(self, event_name: str, event: Any) -> None: ...


@dataclass(eq=False)
class _Subscription:
    event_name: str | None  # None receives every event
    callback: Callable[[str, Any], None]
    owner: object


class EventBus:
    """Dispatches events to handlers in registration order.

    Handlers run on the publishing thread; exceptions raised by a handler
    propagate to the publisher.
    """

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []

    def on(self, event_name: str, handler: EventHandler) -> Callable[[], None]:
        """Register *handler* for *event_name*. Returns unsubscribe function."""
        sub = _Subscription(event_name, lambda _name, event: handler(event), handler)
        self._subscriptions.append(sub)
        return lambda: self._remove(sub)

    def subscribe(self, listener: KeyListener) -> Callable[[], None]:
        """Register a listener for all events. Returns unsubscribe function."""
        if not isinstance(listener, KeyListener):
            raise TypeError(f"{listener!r} does not implement handle(event_name, event)")
        sub = _Subscription(None, listener.handle, listener)
        self._subscriptions.append(sub)
        return lambda: self._remove(sub)

    def unsubscribe(self, listener: object) -> None:
        """Remove every registration made for *listener* (object or handler)."""
        self._subscriptions = [s for s in self._subscriptions if s.owner is not listener]

    @contextmanager
    def subscribed(self, listener: KeyListener) -> Iterator[KeyListener]:
        """Keep *listener* subscribed for the duration of a ``with`` block."""
        unsubscribe = self.subscribe(listener)
        try:
            yield listener
        finally:
            unsubscribe()

    def publish(self, event_name: str, event: Any) -> None:
        # Snapshot so handlers may (un)subscribe while being dispatched
        for sub in list(self._subscriptions):
            if sub.event_name is None or sub.event_name == event_name:
                sub.callback(event_name, event)

    def clear(self) -> None:
        self._subscriptions.clear()

    def __len__(self) -> int:
        return len(self._subscriptions)

    def _remove(self, sub: _Subscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)
