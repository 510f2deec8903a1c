"""Animation bookkeeping for in-flight move transitions.

``AnimationTracker`` holds the set of live animation handles and publishes
``ALL_COMPLETE`` when the set drains. Membership, not a bare counter, decides
whether anything is running: registering a handle twice is idempotent and a
duplicate or unknown completion is ignored, so a completion callback firing
more than once can neither double count nor drive the count negative.

``TimedAnimator`` is a headless animation layer. It stands in for the visual
front end: each animation is a timer whose expiry is marshalled onto the
front-end dispatcher, where the handle is completed and the disk is moved in
a visual mirror of the towers.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Set

from . import metrics
from .dispatch import Dispatcher, ImmediateDispatcher
from .events import EventBus
from .models import AnimationEvent, AnimationEventType, Move
from .tower_state import starting_layout

logger = logging.getLogger(__name__)

_HANDLE_IDS = itertools.count(1)


@dataclass(frozen=True)
class AnimationHandle:
    """Opaque token for one in-flight visual transition."""

    id: int = field(default_factory=lambda: next(_HANDLE_IDS))
    label: str = ""

    def __repr__(self) -> str:
        return f"AnimationHandle({self.id}{', ' + self.label if self.label else ''})"


class Animator(Protocol):
    """Animation layer the game core hands moves to."""

    def animate(self, move: Move, duration_seconds: float) -> AnimationHandle: ...

    def reset_visual(self, disk_count: int) -> None: ...

    def cancel_all(self) -> None: ...


class AnimationTracker:
    """Set of running animations with a single drained notification."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._live: Set[AnimationHandle] = set()
        self.events: EventBus[AnimationEvent] = EventBus("animation")

    def register(self, handle: AnimationHandle) -> AnimationHandle:
        with self._lock:
            if handle in self._live:
                logger.debug("Animation %r already registered", handle)
                return handle
            self._live.add(handle)
            count = len(self._live)
        metrics.ANIMATIONS_IN_FLIGHT.set(count)
        logger.debug("Registered animation %r (%d running)", handle, count)
        return handle

    def complete(self, handle: AnimationHandle) -> bool:
        """Remove a handle; returns True if this completion drained the set."""
        with self._lock:
            if handle not in self._live:
                logger.debug("Ignoring completion of unknown animation %r", handle)
                return False
            self._live.remove(handle)
            count = len(self._live)
        metrics.ANIMATIONS_IN_FLIGHT.set(count)
        logger.debug("Completed animation %r (%d running)", handle, count)
        if count:
            return False
        self.events.emit(AnimationEvent(type=AnimationEventType.ALL_COMPLETE))
        return True

    def is_any_running(self) -> bool:
        with self._lock:
            return bool(self._live)

    def running_count(self) -> int:
        with self._lock:
            return len(self._live)


class TimedAnimator:
    """Headless animation layer driven by timers.

    Args:
        tracker: Tracker that owns the live-handle set.
        dispatcher: Front-end context on which completions are delivered.
    """

    def __init__(
        self,
        tracker: AnimationTracker,
        dispatcher: Optional[Dispatcher] = None,
    ) -> None:
        self._tracker = tracker
        self._dispatcher = dispatcher or ImmediateDispatcher()
        self._lock = threading.Lock()
        self._timers: Dict[AnimationHandle, threading.Timer] = {}
        self._visual: List[List[int]] = [[], [], []]

    def reset_visual(self, disk_count: int) -> None:
        with self._lock:
            self._visual = starting_layout(disk_count)

    def visual_towers(self) -> List[List[int]]:
        """Tower contents as currently drawn."""
        with self._lock:
            return [list(tower) for tower in self._visual]

    def animate(self, move: Move, duration_seconds: float) -> AnimationHandle:
        handle = self._tracker.register(AnimationHandle(label=move.to_notation()))
        timer = threading.Timer(max(0.0, duration_seconds), self._expire, args=(handle, move))
        timer.daemon = True
        with self._lock:
            self._timers[handle] = timer
        timer.start()
        return handle

    def _expire(self, handle: AnimationHandle, move: Move) -> None:
        with self._lock:
            if handle not in self._timers:
                return
        self._dispatcher.submit(self._finish, handle, move)

    def _finish(self, handle: AnimationHandle, move: Move) -> None:
        with self._lock:
            if self._timers.pop(handle, None) is None:
                return
            # Invalid moves snap back to where they started.
            if move.valid:
                source = self._visual[move.from_tower]
                if source and source[-1] == move.disk:
                    self._visual[move.to_tower].append(source.pop())
        self._tracker.complete(handle)

    def pending(self) -> int:
        with self._lock:
            return len(self._timers)

    def cancel_all(self) -> None:
        """Stop pending timers and complete their handles."""
        with self._lock:
            timers = list(self._timers.items())
            self._timers.clear()
        for handle, timer in timers:
            timer.cancel()
            self._tracker.complete(handle)
        if timers:
            logger.info("Cancelled %d pending animation(s)", len(timers))
