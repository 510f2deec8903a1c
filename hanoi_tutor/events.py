"""Typed publish/subscribe used by TowerState and AnimationTracker.

Listeners are plain callables invoked synchronously, in registration order,
on the thread that emitted the event. They must return quickly: the
emitting component is stalled until every listener has run.

Usage:
    from hanoi_tutor.events import EventBus
    from hanoi_tutor.models import TowerEvent

    bus: EventBus[TowerEvent] = EventBus("tower")
    unsubscribe = bus.subscribe(lambda event: print(event.type))
    bus.emit(event)
    unsubscribe()
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT")
Listener = Callable[[EventT], None]


class EventBus(Generic[EventT]):
    """Ordered listener registry for one event type."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: Listener) -> bool:
        """Remove a listener; returns False when it was not registered."""
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                return False
        return True

    def emit(self, event: EventT) -> None:
        # Snapshot so listeners may (un)subscribe while being notified.
        with self._lock:
            listeners = list(self._listeners)
        logger.debug("%s bus emitting %r to %d listener(s)", self.name, event, len(listeners))
        # A failing listener must not abort the emitter or starve later listeners.
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("%s bus listener %r failed on %r", self.name, listener, event)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
