"""Autoplay: one optimal move per fixed interval, with a two-phase stop.

States::

    IDLE --start()--> RUNNING --stop(), nothing animating--> IDLE
                         |
                         +--stop(), animation in flight--> STOPPING_AWAITING_ANIMATIONS
                                                              |
                                         next ALL_COMPLETE ---+--> IDLE

``start`` disables user input and launches a timer thread that fires tick 0
immediately and then every ``interval_ms`` at a fixed rate. Each tick is
marshalled onto the front-end dispatcher, where it pulls the next move from
the optimal track, marks it valid, applies it to the tower state and hands
it to the animator.

``stop`` cancels the timer at once so no further move is queued, but input
is re-enabled only when no animation is in flight. Otherwise the scheduler
waits in STOPPING_AWAITING_ANIMATIONS for the tracker's next ALL_COMPLETE.
Input is re-enabled exactly once per start/stop cycle.

Every tick carries the generation number it was scheduled under; ``stop``
bumps the generation under the scheduler lock, so a tick that was already
queued when ``stop`` returned finds itself stale and does nothing.

There is no animation timeout: if a completion signal is lost the
scheduler stays in STOPPING_AWAITING_ANIMATIONS and input stays disabled.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from . import metrics
from .animation import AnimationTracker, Animator
from .dispatch import Dispatcher, ImmediateDispatcher
from .errors import AlreadyRunningError, InvalidConfigurationError, NoMovesLeftError, NotRunningError
from .input_gate import InputController
from .models import AnimationEvent, AutoplayState
from .tower_state import TowerState
from .tutor import OptimalTrack

logger = logging.getLogger(__name__)

DEFAULT_ANIMATION_FRACTION = 0.9


class AutoplayScheduler:
    """Periodic producer of optimal moves for one game session."""

    def __init__(
        self,
        tower_state: TowerState,
        optimal_track: OptimalTrack,
        tracker: AnimationTracker,
        animator: Animator,
        input_controller: InputController,
        dispatcher: Optional[Dispatcher] = None,
        animation_fraction: float = DEFAULT_ANIMATION_FRACTION,
    ) -> None:
        if not 0.0 < animation_fraction <= 1.0:
            raise InvalidConfigurationError(
                "Animation fraction must be in (0, 1]",
                setting="animation_fraction",
                value=animation_fraction,
            )
        self._tower_state = tower_state
        self._optimal_track = optimal_track
        self._tracker = tracker
        self._animator = animator
        self._input = input_controller
        self._dispatcher = dispatcher or ImmediateDispatcher()
        self._animation_fraction = animation_fraction

        self._lock = threading.RLock()
        self._state = AutoplayState.IDLE
        self._generation = 0
        self._interval_ms = 0
        self._tick_count = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._unsubscribe = tracker.events.subscribe(self._on_animation_event)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> AutoplayState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state == AutoplayState.RUNNING

    @property
    def is_idle(self) -> bool:
        return self.state == AutoplayState.IDLE

    @property
    def tick_count(self) -> int:
        """Ticks that applied a move since the last start()."""
        with self._lock:
            return self._tick_count

    @property
    def interval_ms(self) -> int:
        with self._lock:
            return self._interval_ms

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, interval_ms: int) -> None:
        """IDLE -> RUNNING. Input is disabled before the first tick fires."""
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, int) or interval_ms <= 0:
            raise InvalidConfigurationError(
                "Autoplay interval must be a positive number of milliseconds",
                setting="interval_ms",
                value=interval_ms,
            )
        with self._lock:
            if self._state != AutoplayState.IDLE:
                raise AlreadyRunningError(
                    "Autoplay is already active",
                    context={"state": self._state.value},
                )
            self._input.disable_user_input()
            self._state = AutoplayState.RUNNING
            self._generation += 1
            self._interval_ms = interval_ms
            self._tick_count = 0
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._generation, interval_ms / 1000.0, self._stop_event),
                name=f"hanoi-autoplay-{self._generation}",
                daemon=True,
            )
            metrics.AUTOPLAY_RUNNING.set(1)
            self._thread.start()
        logger.info("Autoplay started with %d ms interval", interval_ms)

    def stop(self, strict: bool = False) -> AutoplayState:
        """Cancel the timer; re-enable input now or once animations drain.

        Returns:
            The state after the call.

        Raises:
            NotRunningError: ``strict`` is set and the scheduler is idle.
        """
        with self._lock:
            if self._state == AutoplayState.IDLE:
                if strict:
                    raise NotRunningError("Autoplay is not running")
                return self._state
            if self._state == AutoplayState.STOPPING_AWAITING_ANIMATIONS:
                return self._state
            self._generation += 1
            self._stop_event.set()
            thread, self._thread = self._thread, None
            metrics.AUTOPLAY_RUNNING.set(0)
            if self._tracker.is_any_running():
                self._state = AutoplayState.STOPPING_AWAITING_ANIMATIONS
                logger.info("Autoplay stopping; waiting for animations before enabling input")
            else:
                self._state = AutoplayState.IDLE
                self._input.enable_user_input()
                logger.info("Autoplay stopped")
            state = self._state

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(1.0, self._interval_ms / 1000.0))
        return state

    def shutdown(self) -> None:
        self.stop()
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Timer thread and tick body
    # ------------------------------------------------------------------

    def _run(self, generation: int, interval_s: float, stop_event: threading.Event) -> None:
        next_tick = time.monotonic()
        while not stop_event.is_set():
            self._dispatcher.submit(self._tick, generation)
            # Fixed rate: deadlines advance by the interval, not by tick duration.
            next_tick += interval_s
            if stop_event.wait(max(0.0, next_tick - time.monotonic())):
                break

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state != AutoplayState.RUNNING:
                metrics.record_autoplay_tick("cancelled")
                return
            try:
                move = self._optimal_track.get_next_move().with_validity(True)
            except NoMovesLeftError:
                metrics.record_autoplay_tick("exhausted")
                logger.info("Optimal sequence exhausted; stopping autoplay")
                self.stop()
                return

            won = self._tower_state.apply(move)
            self._animator.animate(move, self._interval_ms / 1000.0 * self._animation_fraction)
            self._tick_count += 1
            metrics.record_autoplay_tick("applied")
            if won:
                logger.info("Autoplay finished the puzzle after %d tick(s)", self._tick_count)
                self.stop()

    def _on_animation_event(self, event: AnimationEvent) -> None:
        with self._lock:
            if self._state != AutoplayState.STOPPING_AWAITING_ANIMATIONS:
                return
            self._state = AutoplayState.IDLE
            self._input.enable_user_input()
        logger.info("Animations drained; autoplay stopped and input enabled")
