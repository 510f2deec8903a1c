"""Test doubles and small helpers shared across the hanoi_tutor tests."""

import threading
import time
from typing import Callable, List, Tuple

from hanoi_tutor.animation import AnimationHandle, AnimationTracker
from hanoi_tutor.models import Move

CANONICAL_THREE_DISK_SOLUTION: List[Tuple[int, int, int]] = [
    (1, 0, 2),
    (2, 0, 1),
    (1, 2, 1),
    (3, 0, 2),
    (1, 1, 0),
    (2, 1, 2),
    (1, 0, 2),
]


def make_move(disk: int, from_tower: int, to_tower: int, valid: bool = True) -> Move:
    return Move(disk=disk, from_tower=from_tower, to_tower=to_tower, valid=valid)


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.005) -> bool:
    """Poll predicate until it holds or the deadline passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class ManualAnimator:
    """Animation layer whose animations finish only when the test says so.

    With ``auto_complete`` set every animation finishes inside animate(),
    which models an instantaneous front end.
    """

    def __init__(self, tracker: AnimationTracker, auto_complete: bool = False) -> None:
        self.tracker = tracker
        self.auto_complete = auto_complete
        self.animated: List[Tuple[Move, float]] = []
        self.visual_resets: List[int] = []
        self._pending: List[AnimationHandle] = []
        self._lock = threading.Lock()

    def animate(self, move: Move, duration_seconds: float) -> AnimationHandle:
        handle = self.tracker.register(AnimationHandle(label=move.to_notation()))
        with self._lock:
            self.animated.append((move, duration_seconds))
            self._pending.append(handle)
        if self.auto_complete:
            self.finish(handle)
        return handle

    def finish(self, handle: AnimationHandle) -> bool:
        with self._lock:
            if handle in self._pending:
                self._pending.remove(handle)
        return self.tracker.complete(handle)

    def finish_all(self) -> None:
        with self._lock:
            pending, self._pending = self._pending, []
        for handle in pending:
            self.tracker.complete(handle)

    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def pending_handles(self) -> List[AnimationHandle]:
        with self._lock:
            return list(self._pending)

    def reset_visual(self, disk_count: int) -> None:
        self.visual_resets.append(disk_count)

    def cancel_all(self) -> None:
        self.finish_all()
