"""Optimal-solution tracking consumed by the game core.

``OptimalTrack`` is the interface TowerState, AutoplayScheduler and
GameSession depend on. ``Tutor`` is the stock implementation: it generates
the 2^N - 1 move solution for the current disk count and walks a cursor
through it as moves are taken, validated or reverted.

Usage:
    state = TowerState()
    tutor = Tutor(state)
    state.attach_optimal_track(tutor)
    state.initialize(3)
    tutor.restart()

    move = tutor.get_next_move().with_validity(True)
    state.apply(move)
"""

from __future__ import annotations

import logging
import threading
from typing import List, Protocol, runtime_checkable

from .errors import InvalidConfigurationError, NoMovesLeftError
from .models import TOWER_COUNT, Move
from .tower_state import TowerState

logger = logging.getLogger(__name__)


@runtime_checkable
class OptimalTrack(Protocol):
    """Source of optimal moves and grading for one game."""

    def is_enabled(self) -> bool: ...

    def get_next_move(self) -> Move: ...

    def moves_left(self) -> bool: ...

    def validate_move(self, candidate: Move) -> bool: ...

    def revert_move(self) -> None: ...

    def get_best_moves(self) -> List[Move]: ...

    def get_move_number(self) -> int: ...


def solve(disk_count: int, source: int = 0, target: int = 2) -> List[Move]:
    """Optimal move sequence moving disk_count disks from source to target."""
    if source == target or not (0 <= source < TOWER_COUNT and 0 <= target < TOWER_COUNT):
        raise InvalidConfigurationError(
            "Source and target must be distinct tower indexes",
            setting="target_tower",
            value=(source, target),
        )
    auxiliary = 3 - source - target
    moves: List[Move] = []
    _solve_into(moves, disk_count, source, target, auxiliary)
    return moves


def _solve_into(moves: List[Move], disk: int, source: int, target: int, auxiliary: int) -> None:
    if disk == 0:
        return
    _solve_into(moves, disk - 1, source, auxiliary, target)
    moves.append(Move(disk=disk, from_tower=source, to_tower=target))
    _solve_into(moves, disk - 1, auxiliary, target, source)


class Tutor:
    """Step-by-step tutor over the optimal solution.

    When enabled, only the next optimal move counts as valid; any other
    legal move is rejected so the position always stays on the optimal
    path. When disabled, validation is plain legality and the cursor does
    not move.
    """

    def __init__(
        self,
        tower_state: TowerState,
        enabled: bool = True,
        target_tower: int = 2,
    ) -> None:
        self._tower_state = tower_state
        self._enabled = enabled
        self._target_tower = target_tower
        self._lock = threading.RLock()
        self._best_moves: List[Move] = []
        self._cursor = 0
        if tower_state.is_initialized:
            self.restart()

    def restart(self) -> None:
        """Rebuild the optimal sequence for the tower state's disk count."""
        best_moves = solve(self._tower_state.disk_count, 0, self._target_tower)
        with self._lock:
            self._best_moves = best_moves
            self._cursor = 0
        logger.debug("Tutor prepared %d optimal moves", len(best_moves))

    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._enabled = enabled

    def is_enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def get_next_move(self) -> Move:
        with self._lock:
            if self._cursor >= len(self._best_moves):
                raise NoMovesLeftError(
                    "Optimal sequence exhausted",
                    context={"move_number": self._cursor},
                )
            move = self._best_moves[self._cursor]
            self._cursor += 1
            return move

    def moves_left(self) -> bool:
        with self._lock:
            return self._cursor < len(self._best_moves)

    def validate_move(self, candidate: Move) -> bool:
        # Legality first, outside our lock: TowerState grades under its own
        # lock and calls back into us.
        if not self._tower_state.is_legal(candidate):
            return False
        with self._lock:
            if not self._enabled:
                return True
            if self._cursor >= len(self._best_moves):
                return False
            if not self._best_moves[self._cursor].same_relocation(candidate):
                logger.debug("Rejected suboptimal move %s", candidate.to_notation())
                return False
            self._cursor += 1
            return True

    def revert_move(self) -> None:
        with self._lock:
            if self._cursor > 0:
                self._cursor -= 1

    def get_best_moves(self) -> List[Move]:
        with self._lock:
            return list(self._best_moves)

    def get_move_number(self) -> int:
        with self._lock:
            return self._cursor
