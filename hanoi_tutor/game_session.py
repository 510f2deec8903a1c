"""One playthrough: tower state, tutor, animations, autoplay and input.

GameSession is the composition root for a single game. Every collaborator
is constructed here (or injected by the caller) and owned by the session;
nothing is process-wide.

User-facing operations report expected outcomes as return values:
``attempt_move`` returns ``None`` when a drop is ignored, ``step_forward``
and ``step_back`` return ``None`` when nothing can be stepped. Contract
violations from the components below still raise.

Usage:
    session = GameSession(GameConfig.from_env())
    session.start()
    session.attempt_move(disk=1, to_tower=2)
    session.toggle_autoplay()
    ...
    session.close()
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from .analytics import AnalyticsStore
from .animation import AnimationTracker, Animator, TimedAnimator
from .autoplay import AutoplayScheduler
from .config import GameConfig
from .dispatch import Dispatcher, SerialDispatcher
from .errors import StorageError
from .input_gate import InputGate
from .models import AnalyticsSnapshot, AnimationEvent, AutoplayState, Move, TowerEvent, TowerEventType
from .tower_state import TowerState
from .tutor import Tutor

logger = logging.getLogger(__name__)


class GameSession:
    """Wires the game core together for one game.

    The session is also the input controller handed to the autoplay
    scheduler: when the scheduler re-enables input, the session decides
    whether input should actually be open. In tutor mode input stays open
    while optimal moves remain; in free mode while the game is not won.

    Args:
        config: Game settings; defaults come from the environment.
        dispatcher: Front-end context. A ``SerialDispatcher`` is created
            when omitted and shut down by ``close()``.
        animator: Animation layer. A ``TimedAnimator`` on the session's
            tracker and dispatcher is created when omitted.
        tracker: Animation tracker shared with ``animator``.
        analytics: Store that receives the session totals on a win and on
            close. ``None`` disables persistence.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        dispatcher: Optional[Dispatcher] = None,
        animator: Optional[Animator] = None,
        tracker: Optional[AnimationTracker] = None,
        analytics: Optional[AnalyticsStore] = None,
    ) -> None:
        self.config = config or GameConfig.from_env()
        self._owns_dispatcher = dispatcher is None
        self.dispatcher: Dispatcher = dispatcher or SerialDispatcher()
        self.tracker = tracker or AnimationTracker()
        self.animator: Animator = animator or TimedAnimator(self.tracker, self.dispatcher)
        self.analytics = analytics

        self.tower_state = TowerState()
        self.tutor = Tutor(
            self.tower_state,
            enabled=self.config.tutor_enabled,
        )
        self.tower_state.attach_optimal_track(self.tutor)
        self.gate = InputGate(enabled=False)
        self.scheduler = AutoplayScheduler(
            self.tower_state,
            self.tutor,
            self.tracker,
            self.animator,
            self,
            dispatcher=self.dispatcher,
            animation_fraction=self.config.animation_fraction,
        )

        # Plain flags only; never held while calling into other components.
        self._lock = threading.Lock()
        self._analytics_recorded = False
        self._last_snapshot: Optional[AnalyticsSnapshot] = None
        self._closed = False

        self._subscriptions = [
            self.tower_state.events.subscribe(self._on_tower_event),
            self.tracker.events.subscribe(self._on_animation_event),
        ]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, disk_count: Optional[int] = None, tutor_enabled: Optional[bool] = None) -> None:
        """Begin a new game; callable again to restart."""
        if disk_count is None:
            disk_count = self.config.disk_count
        if tutor_enabled is None:
            tutor_enabled = self.config.tutor_enabled

        self.scheduler.stop()
        self.animator.cancel_all()
        self.tower_state.initialize(disk_count)
        self.tutor.set_enabled(tutor_enabled)
        self.tutor.restart()
        self.animator.reset_visual(disk_count)
        with self._lock:
            self._analytics_recorded = False
        self.gate.enable_user_input()
        logger.info(
            "Started game with %d disks (%s mode)",
            disk_count,
            "tutor" if tutor_enabled else "free",
        )

    def close(self) -> None:
        """Stop autoplay, cancel animations and persist analytics."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self.scheduler.stop()
        self.animator.cancel_all()
        self.scheduler.shutdown()
        self.gate.disable_user_input()
        if self.tower_state.is_initialized:
            self._record_analytics()
        for unsubscribe in self._subscriptions:
            unsubscribe()
        if self._owns_dispatcher:
            self.dispatcher.shutdown()
        logger.info("Game session closed")

    def __enter__(self) -> "GameSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def attempt_move(self, disk: int, to_tower: int) -> Optional[Move]:
        """Drop ``disk`` onto ``to_tower``.

        Drops of a buried disk, onto the disk's own tower, or onto a smaller
        disk are ignored and return ``None`` without logging anything. Any
        other drop is graded by the tutor, logged valid or invalid, and
        animated.
        """
        if not self.gate.enabled:
            return None
        if not self.tower_state.is_top_disk(disk):
            return None
        from_tower = self.tower_state.locate(disk)
        destination_top = self.tower_state.top_of(to_tower)
        if from_tower == to_tower or (destination_top is not None and destination_top < disk):
            return None

        move = Move(disk=disk, from_tower=from_tower, to_tower=to_tower)
        move = move.with_validity(self.tutor.validate_move(move))
        self.tower_state.apply(move)
        self.animator.animate(move, 0.0)
        return move

    def step_forward(self) -> Optional[Move]:
        """Play the next optimal move; None when not possible right now."""
        if not self.can_step_forward:
            return None
        self.gate.disable_user_input()
        move = self.tutor.get_next_move().with_validity(True)
        self.tower_state.apply(move)
        self.animator.animate(move, self.config.animation_seconds)
        return move

    def step_back(self) -> Optional[Move]:
        """Undo the last valid move; returns the reversed move being animated."""
        if not self.can_step_back:
            return None
        self.gate.disable_user_input()
        reversed_move = self.tower_state.undo_last_valid()
        self.tutor.revert_move()
        self.animator.animate(reversed_move, self.config.animation_seconds)
        return reversed_move

    def toggle_autoplay(self, interval_ms: Optional[int] = None) -> Optional[AutoplayState]:
        """Start autoplay when idle, stop it when running.

        Returns the scheduler state after the call, or None when autoplay
        cannot start: tutor mode off, nothing left to play, or an animation
        still in flight.
        """
        state = self.scheduler.state
        if state == AutoplayState.RUNNING:
            return self.scheduler.stop()
        if state == AutoplayState.STOPPING_AWAITING_ANIMATIONS:
            return state
        if not self.tutor.is_enabled() or not self.tutor.moves_left() or self.tracker.is_any_running():
            return None
        if interval_ms is None:
            interval_ms = self.config.autoplay_interval_ms
        self.scheduler.start(interval_ms)
        return self.scheduler.state

    # ------------------------------------------------------------------
    # Affordances
    # ------------------------------------------------------------------

    @property
    def input_enabled(self) -> bool:
        return self.gate.enabled

    @property
    def is_won(self) -> bool:
        return self.tower_state.is_initialized and self.tower_state.check_win()

    @property
    def can_step_forward(self) -> bool:
        return self._can_step() and self.tutor.moves_left()

    @property
    def can_step_back(self) -> bool:
        return self._can_step() and self.tower_state.valid_move_count() > 0

    @property
    def last_snapshot(self) -> Optional[AnalyticsSnapshot]:
        """Analytics totals written by the most recent recording, if any."""
        with self._lock:
            return self._last_snapshot

    def towers(self) -> List[List[int]]:
        return list(self.tower_state.towers())

    def _can_step(self) -> bool:
        return (
            self.tower_state.is_initialized
            and self.tutor.is_enabled()
            and self.scheduler.is_idle
            and not self.tracker.is_any_running()
        )

    # ------------------------------------------------------------------
    # InputController
    # ------------------------------------------------------------------

    def disable_user_input(self) -> None:
        self.gate.disable_user_input()

    def enable_user_input(self) -> None:
        self._update_interface()

    def _update_interface(self) -> None:
        if not self.scheduler.is_idle or not self.tower_state.is_initialized:
            return
        if self.tutor.is_enabled():
            self.gate.allow(self.tutor.moves_left())
        else:
            self.gate.allow(not self.tower_state.check_win())

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_tower_event(self, event: TowerEvent) -> None:
        if event.type != TowerEventType.WON:
            return
        self.gate.disable_user_input()
        logger.info(
            "Puzzle solved in %d move(s), %d optimal",
            self.tower_state.total_move_count(),
            self.tower_state.optimal_move_count(),
        )
        self._record_analytics()

    def _on_animation_event(self, event: AnimationEvent) -> None:
        self._update_interface()

    def _record_analytics(self) -> None:
        with self._lock:
            if self._analytics_recorded or self.analytics is None:
                return
            self._analytics_recorded = True
        try:
            snapshot = self.analytics.record_session(
                self.tower_state.optimal_move_count(),
                self.tower_state.unoptimal_move_count(),
                self.tower_state.elapsed_seconds(),
            )
        except StorageError as e:
            logger.warning("Failed to record analytics: %s", e)
            return
        with self._lock:
            self._last_snapshot = snapshot
