"""
Pydantic Models for Hanoi Tutor Game State
Moves, event payloads and analytics snapshots shared by the game core.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

TOWER_COUNT = 3
MIN_DISKS = 3
MAX_DISKS = 10


class TowerEventType(str, Enum):
    """Events emitted by TowerState"""
    MOVE_APPLIED = "move"
    WON = "win"
    RESET = "reset"


class AnimationEventType(str, Enum):
    """Events emitted by AnimationTracker"""
    ALL_COMPLETE = "all_animations_complete"


class AutoplayState(str, Enum):
    """AutoplayScheduler state enumeration"""
    IDLE = "idle"
    RUNNING = "running"
    STOPPING_AWAITING_ANIMATIONS = "stopping_awaiting_animations"


class Move(BaseModel):
    """Relocation of the top disk of one tower onto another"""
    disk: int = Field(ge=1)
    from_tower: int = Field(alias="from", ge=0, le=TOWER_COUNT - 1)
    to_tower: int = Field(alias="to", ge=0, le=TOWER_COUNT - 1)
    valid: bool = False

    class Config:
        frozen = True
        populate_by_name = True

    def reversed(self) -> "Move":
        """Same disk and validity, source and destination swapped"""
        return Move(
            disk=self.disk,
            from_tower=self.to_tower,
            to_tower=self.from_tower,
            valid=self.valid,
        )

    def with_validity(self, valid: bool) -> "Move":
        """Copy of this move with its rule-check outcome recorded"""
        return self.model_copy(update={"valid": valid})

    def same_relocation(self, other: "Move") -> bool:
        """True when both moves relocate the same disk between the same towers"""
        return (
            self.disk == other.disk
            and self.from_tower == other.from_tower
            and self.to_tower == other.to_tower
        )

    def to_notation(self) -> str:
        """Compact text form, e.g. '1: 0->2'"""
        marker = "" if self.valid else " (invalid)"
        return f"{self.disk}: {self.from_tower}->{self.to_tower}{marker}"


class TowerEvent(BaseModel):
    """Notification published by TowerState"""
    type: TowerEventType
    move: Optional[Move] = None
    won: bool = False

    class Config:
        frozen = True


class AnimationEvent(BaseModel):
    """Notification published by AnimationTracker"""
    type: AnimationEventType = AnimationEventType.ALL_COMPLETE

    class Config:
        frozen = True


class AnalyticsSnapshot(BaseModel):
    """Cumulative analytics persisted between sessions"""
    optimal_moves: int = Field(default=0, ge=0)
    unoptimal_moves: int = Field(default=0, ge=0)
    elapsed_seconds: int = Field(default=0, ge=0)
    optimal_moves_over_time: List[int] = Field(default_factory=list)

    class Config:
        frozen = True
