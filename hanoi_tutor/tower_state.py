"""Authoritative tower contents and move log for one game session.

TowerState owns the three towers (index 0 is the bottom of each list), the
ordered move log, win detection and undo. Each game session constructs its
own instance and hands it to every collaborator that needs it.

Invariants kept by every mutator:

- disk identifiers strictly decrease from bottom to top on each tower;
- replaying the valid moves of the log from the starting layout yields the
  current tower contents (see ``replay_valid_moves``);
- a move is applied all-or-nothing: both the pop and the push happen, or
  neither does.

All state access goes through one re-entrant lock so the autoplay tick and
the front-end context never observe a half-applied move. Events are
published after the lock is released.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from . import metrics
from .errors import (
    EmptyHistoryError,
    IllegalMoveError,
    InvalidConfigurationError,
    NotFoundError,
    NotInitializedError,
    OutOfRangeError,
)
from .events import EventBus
from .models import MAX_DISKS, MIN_DISKS, TOWER_COUNT, Move, TowerEvent, TowerEventType

if TYPE_CHECKING:
    from .tutor import OptimalTrack

logger = logging.getLogger(__name__)


def validate_disk_count(disk_count: int) -> int:
    """Return disk_count or raise InvalidConfigurationError outside 3..10."""
    if isinstance(disk_count, bool) or not isinstance(disk_count, int):
        raise InvalidConfigurationError(
            "Disk count must be an integer",
            setting="disk_count",
            value=disk_count,
        )
    if not MIN_DISKS <= disk_count <= MAX_DISKS:
        raise InvalidConfigurationError(
            f"Disk count must be between {MIN_DISKS} and {MAX_DISKS}",
            setting="disk_count",
            value=disk_count,
        )
    return disk_count


def starting_layout(disk_count: int) -> List[List[int]]:
    """Canonical start: every disk on tower 0, largest at the bottom."""
    return [list(range(disk_count, 0, -1)), [], []]


def replay_valid_moves(disk_count: int, moves: Iterable[Move]) -> List[List[int]]:
    """Rebuild tower contents by replaying the valid moves of a log.

    Invalid moves never touched the towers, so they are skipped here too.
    """
    towers = starting_layout(disk_count)
    for move in moves:
        if not move.valid:
            continue
        source = towers[move.from_tower]
        if not source or source[-1] != move.disk:
            raise IllegalMoveError(
                f"Log replay expected disk {move.disk} on top of tower {move.from_tower}",
                rule="top_of_source",
            )
        towers[move.to_tower].append(source.pop())
    return towers


def is_winning_layout(towers: List[List[int]]) -> bool:
    """Tower 0 empty and at least one of towers 1/2 empty."""
    return not towers[0] and (not towers[1] or not towers[2])


class TowerState:
    """Three LIFO towers plus the authoritative move log.

    Args:
        optimal_track: Optional tutor used to grade every applied move as
            optimal or not. Grading only happens while the track is enabled.
    """

    def __init__(self, optimal_track: Optional["OptimalTrack"] = None) -> None:
        self._lock = threading.RLock()
        self._towers: List[List[int]] = []
        self._moves: List[Move] = []
        self._optimal_moves: List[bool] = []
        self._disk_count = 0
        self._initialized = False
        self._started_at = time.monotonic()
        self._optimal_track = optimal_track
        self.events: EventBus[TowerEvent] = EventBus("tower")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach_optimal_track(self, optimal_track: Optional["OptimalTrack"]) -> None:
        with self._lock:
            self._optimal_track = optimal_track

    def initialize(self, disk_count: int) -> None:
        """Reset to the starting layout; callable again to begin a new game."""
        validate_disk_count(disk_count)
        with self._lock:
            self._towers = starting_layout(disk_count)
            self._moves = []
            self._optimal_moves = []
            self._disk_count = disk_count
            self._initialized = True
            self._started_at = time.monotonic()
        logger.info("Initialized towers with %d disks", disk_count)

    def reset(self) -> None:
        """Clear towers and log; initialize() is required before further use."""
        with self._lock:
            self._require_initialized()
            self._towers = []
            self._moves = []
            self._optimal_moves = []
            self._disk_count = 0
            self._initialized = False
        logger.info("Tower state reset")
        self.events.emit(TowerEvent(type=TowerEventType.RESET))

    @property
    def is_initialized(self) -> bool:
        with self._lock:
            return self._initialized

    @property
    def disk_count(self) -> int:
        with self._lock:
            self._require_initialized()
            return self._disk_count

    def elapsed_seconds(self) -> float:
        """Seconds since the current game was initialized."""
        with self._lock:
            return time.monotonic() - self._started_at

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def tower(self, index: int) -> List[int]:
        """Copy of one tower, bottom first."""
        with self._lock:
            self._require_initialized()
            return list(self._towers[self._check_index(index)])

    def towers(self) -> Tuple[List[int], List[int], List[int]]:
        with self._lock:
            self._require_initialized()
            return (list(self._towers[0]), list(self._towers[1]), list(self._towers[2]))

    def top_of(self, index: int) -> Optional[int]:
        """Top disk of a tower, or None when it is empty."""
        with self._lock:
            self._require_initialized()
            tower = self._towers[self._check_index(index)]
            return tower[-1] if tower else None

    def tops(self) -> List[Optional[int]]:
        with self._lock:
            self._require_initialized()
            return [tower[-1] if tower else None for tower in self._towers]

    def is_top_disk(self, disk: int) -> bool:
        """True iff disk sits at the top of whichever tower holds it."""
        with self._lock:
            self._require_initialized()
            return any(tower and tower[-1] == disk for tower in self._towers)

    def locate(self, disk: int) -> int:
        """Index of the tower currently holding disk."""
        with self._lock:
            self._require_initialized()
            for index, tower in enumerate(self._towers):
                if disk in tower:
                    return index
        raise NotFoundError(f"Disk {disk} is not on any tower", disk=disk)

    def is_legal(self, move: Move) -> bool:
        """Disk is the top of the source and fits on the destination."""
        with self._lock:
            self._require_initialized()
            return self._violated_rule(move) is None

    def check_win(self) -> bool:
        with self._lock:
            self._require_initialized()
            return is_winning_layout(self._towers)

    # ------------------------------------------------------------------
    # Move log
    # ------------------------------------------------------------------

    def apply(self, move: Move) -> bool:
        """Apply a move and append it to the log.

        Valid moves relocate the top disk of ``move.from_tower`` onto
        ``move.to_tower``; invalid moves leave the towers untouched. Either
        way the move is logged and a single event is published: ``WON`` if
        the game is now finished, ``MOVE_APPLIED`` otherwise.

        Returns:
            Whether the game is won after this move.

        Raises:
            IllegalMoveError: ``move.valid`` is set but the move breaks the
                rules. Nothing is mutated in that case.
        """
        with self._lock:
            self._require_initialized()
            if move.valid:
                rule = self._violated_rule(move)
                if rule is not None:
                    raise IllegalMoveError(
                        f"Move {move.to_notation()} is marked valid but breaks the {rule} rule",
                        rule=rule,
                        context={"towers": [list(t) for t in self._towers]},
                    )
                disk = self._towers[move.from_tower].pop()
                self._towers[move.to_tower].append(disk)
            self._moves.append(move)
            self._grade(move)
            won = is_winning_layout(self._towers)
            disk_count = self._disk_count

        metrics.record_move_applied(move.valid)
        if won:
            metrics.record_game_won(disk_count)
            logger.info("Game won after move %s", move.to_notation())
        else:
            logger.debug("Applied move %s", move.to_notation())

        event_type = TowerEventType.WON if won else TowerEventType.MOVE_APPLIED
        self.events.emit(TowerEvent(type=event_type, move=move, won=won))
        return won

    def undo_last_valid(self) -> Move:
        """Pop the log back to the last valid move and revert it.

        Invalid moves popped on the way are discarded.

        Returns:
            The reversed move (source and destination swapped) to animate.
        """
        with self._lock:
            self._require_initialized()
            if not any(move.valid for move in self._moves):
                raise EmptyHistoryError("No valid moves have been logged yet")
            # Grading history is kept: it records attempts, not the board.
            while True:
                move = self._moves.pop()
                if move.valid:
                    break
            disk = self._towers[move.to_tower].pop()
            self._towers[move.from_tower].append(disk)

        metrics.MOVES_UNDONE.inc()
        logger.debug("Reverted move %s", move.to_notation())
        return move.reversed()

    def moves(self) -> List[Move]:
        with self._lock:
            self._require_initialized()
            return list(self._moves)

    def last_move(self) -> Optional[Move]:
        with self._lock:
            self._require_initialized()
            return self._moves[-1] if self._moves else None

    def total_move_count(self) -> int:
        with self._lock:
            self._require_initialized()
            return len(self._moves)

    def valid_move_count(self) -> int:
        with self._lock:
            self._require_initialized()
            return sum(1 for move in self._moves if move.valid)

    def invalid_move_count(self) -> int:
        with self._lock:
            self._require_initialized()
            return sum(1 for move in self._moves if not move.valid)

    # ------------------------------------------------------------------
    # Optimal grading
    # ------------------------------------------------------------------

    def optimal_moves(self) -> List[bool]:
        """One entry per graded move: whether it matched the optimal sequence."""
        with self._lock:
            return list(self._optimal_moves)

    def optimal_move_count(self) -> int:
        with self._lock:
            return sum(1 for optimal in self._optimal_moves if optimal)

    def unoptimal_move_count(self) -> int:
        with self._lock:
            return sum(1 for optimal in self._optimal_moves if not optimal)

    def _grade(self, move: Move) -> None:
        track = self._optimal_track
        if track is None or not track.is_enabled():
            return
        best_moves = track.get_best_moves()
        index = track.get_move_number() - 1
        optimal = 0 <= index < len(best_moves) and best_moves[index].same_relocation(move)
        self._optimal_moves.append(optimal)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("Tower state accessed before being initialized")

    @staticmethod
    def _check_index(index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < TOWER_COUNT:
            raise OutOfRangeError(
                "Towers must be referenced using indexes 0, 1, or 2",
                index=index,
            )
        return index

    def _violated_rule(self, move: Move) -> Optional[str]:
        source = self._towers[move.from_tower]
        if not source or source[-1] != move.disk:
            return "top_of_source"
        destination = self._towers[move.to_tower]
        if destination and destination[-1] <= move.disk:
            return "ordering"
        return None
