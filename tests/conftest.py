"""
Shared pytest fixtures for hanoi_tutor tests.

Game state fixtures are function-scoped so every test starts from a fresh,
independently owned session.
"""

import sys
from pathlib import Path
from typing import Callable, List, Tuple

import pytest

# Ensure the project root is on sys.path so `import hanoi_tutor` and
# `import tests.helpers` work when running pytest without installing.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hanoi_tutor.animation import AnimationTracker  # noqa: E402
from hanoi_tutor.config import GameConfig  # noqa: E402
from hanoi_tutor.dispatch import ImmediateDispatcher  # noqa: E402
from hanoi_tutor.input_gate import InputGate  # noqa: E402
from hanoi_tutor.models import Move  # noqa: E402
from hanoi_tutor.tower_state import TowerState  # noqa: E402
from hanoi_tutor.tutor import Tutor  # noqa: E402
from tests.helpers import CANONICAL_THREE_DISK_SOLUTION, ManualAnimator, make_move  # noqa: E402


# =============================================================================
# GAME STATE FIXTURES
# =============================================================================


@pytest.fixture
def tower_state() -> TowerState:
    """TowerState initialized with three disks and no tutor attached."""
    state = TowerState()
    state.initialize(3)
    return state


@pytest.fixture
def tutored_state() -> Tuple[TowerState, Tutor]:
    """Three-disk TowerState graded by an enabled Tutor."""
    state = TowerState()
    tutor = Tutor(state)
    state.attach_optimal_track(tutor)
    state.initialize(3)
    tutor.restart()
    return state, tutor


@pytest.fixture
def canonical_moves() -> List[Move]:
    return [make_move(d, f, t) for d, f, t in CANONICAL_THREE_DISK_SOLUTION]


@pytest.fixture
def move_factory() -> Callable[..., Move]:
    """Factory for creating Move instances with customizable defaults."""

    def _create_move(
        disk: int = 1,
        from_tower: int = 0,
        to_tower: int = 2,
        valid: bool = True,
    ) -> Move:
        return Move(disk=disk, from_tower=from_tower, to_tower=to_tower, valid=valid)

    return _create_move


# =============================================================================
# CONCURRENCY FIXTURES
# =============================================================================


@pytest.fixture
def tracker() -> AnimationTracker:
    return AnimationTracker()


@pytest.fixture
def manual_animator(tracker: AnimationTracker) -> ManualAnimator:
    return ManualAnimator(tracker)


@pytest.fixture
def input_gate() -> InputGate:
    return InputGate(enabled=True)


@pytest.fixture
def immediate_dispatcher() -> ImmediateDispatcher:
    return ImmediateDispatcher()


@pytest.fixture
def game_config() -> GameConfig:
    """Fast config: three disks, 20 ms autoplay, tutor on."""
    return GameConfig(disk_count=3, autoplay_interval_ms=20, tutor_enabled=True)
