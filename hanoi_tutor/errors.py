"""
Hanoi Tutor Error Hierarchy

Unified exception hierarchy for the game core. All custom exceptions
inherit from HanoiTutorError so callers can catch and filter them in one
place.

Contract violations (NotInitializedError, OutOfRangeError,
EmptyHistoryError, IllegalMoveError) are raised loudly. User-triggered
edge cases are reported by the session as plain return values instead.

Usage:
    from hanoi_tutor.errors import EmptyHistoryError

    try:
        reversed_move = state.undo_last_valid()
    except EmptyHistoryError as e:
        logger.warning(f"Nothing to undo: {e.message}")
"""

from typing import Any

__all__ = [
    # Scheduler errors
    "AlreadyRunningError",
    "AutoplayError",
    # Game state errors
    "EmptyHistoryError",
    "GameStateError",
    # Base error
    "HanoiTutorError",
    "IllegalMoveError",
    # Configuration errors
    "InvalidConfigurationError",
    # Tutor errors
    "NoMovesLeftError",
    "NotFoundError",
    "NotInitializedError",
    "NotRunningError",
    "OutOfRangeError",
    # Storage errors
    "AnalyticsFormatError",
    "StorageError",
]


class HanoiTutorError(Exception):
    """Base exception for all Hanoi Tutor errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "HANOI_TUTOR_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Configuration Errors
# =============================================================================


class InvalidConfigurationError(HanoiTutorError):
    """Bad game configuration.

    Raised for a disk count outside 3..10, a non-positive autoplay
    interval, or an unusable environment setting.
    """
    code: str = "INVALID_CONFIGURATION"

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if setting:
            self.context["setting"] = setting
            self.context["value"] = value


# =============================================================================
# Game State Errors
# =============================================================================


class GameStateError(HanoiTutorError):
    """Base class for tower state contract violations."""
    code: str = "GAME_STATE_ERROR"


class NotInitializedError(GameStateError):
    """Game state used before initialize() or after reset()."""
    code: str = "NOT_INITIALIZED"


class OutOfRangeError(GameStateError, IndexError):
    """Tower index outside 0..2."""
    code: str = "OUT_OF_RANGE"

    def __init__(
        self,
        message: str,
        index: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if index is not None:
            self.context["index"] = index


class NotFoundError(GameStateError, LookupError):
    """Disk is not tracked by any tower."""
    code: str = "NOT_FOUND"

    def __init__(
        self,
        message: str,
        disk: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if disk is not None:
            self.context["disk"] = disk


class EmptyHistoryError(GameStateError):
    """Undo requested but the log holds no valid move."""
    code: str = "EMPTY_HISTORY"


class IllegalMoveError(GameStateError):
    """Move marked valid that cannot be applied to the current towers.

    Legality is the caller's responsibility; this is raised before any
    tower is touched so application stays all-or-nothing.

    Attributes:
        rule: Which rule failed ("top_of_source" or "ordering")
    """
    code: str = "ILLEGAL_MOVE"

    def __init__(
        self,
        message: str,
        rule: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.rule = rule
        if rule:
            self.context["rule"] = rule


# =============================================================================
# Tutor Errors
# =============================================================================


class NoMovesLeftError(HanoiTutorError):
    """The optimal move sequence is exhausted."""
    code: str = "NO_MOVES_LEFT"


# =============================================================================
# Autoplay Errors
# =============================================================================


class AutoplayError(HanoiTutorError):
    """Base class for autoplay scheduler misuse."""
    code: str = "AUTOPLAY_ERROR"


class AlreadyRunningError(AutoplayError):
    """start() called while the scheduler is not idle."""
    code: str = "ALREADY_RUNNING"


class NotRunningError(AutoplayError):
    """Strict stop() called while the scheduler is idle."""
    code: str = "NOT_RUNNING"


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(HanoiTutorError):
    """Analytics file could not be read or written."""
    code: str = "STORAGE_ERROR"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if path:
            self.context["path"] = path


class AnalyticsFormatError(StorageError):
    """Analytics file holds a line that is not an integer."""
    code: str = "ANALYTICS_FORMAT_ERROR"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line_number: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, path=path, context=context)
        if line_number is not None:
            self.context["line_number"] = line_number
