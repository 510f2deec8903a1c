"""Tests for hanoi_tutor/errors.py - error hierarchy."""

import pytest

from hanoi_tutor.errors import (
    AlreadyRunningError,
    AnalyticsFormatError,
    AutoplayError,
    EmptyHistoryError,
    GameStateError,
    HanoiTutorError,
    IllegalMoveError,
    InvalidConfigurationError,
    NoMovesLeftError,
    NotFoundError,
    NotInitializedError,
    NotRunningError,
    OutOfRangeError,
    StorageError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_class",
        [
            InvalidConfigurationError,
            NotInitializedError,
            OutOfRangeError,
            NotFoundError,
            EmptyHistoryError,
            IllegalMoveError,
            NoMovesLeftError,
            AlreadyRunningError,
            NotRunningError,
            StorageError,
            AnalyticsFormatError,
        ],
    )
    def test_all_derive_from_base(self, error_class):
        assert issubclass(error_class, HanoiTutorError)

    def test_game_state_group(self):
        for error_class in (NotInitializedError, OutOfRangeError, NotFoundError, EmptyHistoryError):
            assert issubclass(error_class, GameStateError)

    def test_builtin_compatibility(self):
        assert issubclass(OutOfRangeError, IndexError)
        assert issubclass(NotFoundError, LookupError)

    def test_autoplay_group(self):
        assert issubclass(AlreadyRunningError, AutoplayError)
        assert issubclass(NotRunningError, AutoplayError)

    def test_format_error_is_storage_error(self):
        assert issubclass(AnalyticsFormatError, StorageError)


class TestErrorPayload:
    def test_str_without_context(self):
        assert str(EmptyHistoryError("nothing")) == "[EMPTY_HISTORY] nothing"

    def test_str_with_context(self):
        error = OutOfRangeError("bad tower", index=5)
        assert str(error) == "[OUT_OF_RANGE] bad tower (index=5)"

    def test_code_override(self):
        error = HanoiTutorError("custom", code="CUSTOM")
        assert error.code == "CUSTOM"

    def test_to_dict(self):
        error = InvalidConfigurationError("bad disks", setting="disk_count", value=11)
        assert error.to_dict() == {
            "code": "INVALID_CONFIGURATION",
            "message": "bad disks",
            "context": {"setting": "disk_count", "value": 11},
        }

    def test_illegal_move_rule(self):
        error = IllegalMoveError("nope", rule="ordering")
        assert error.rule == "ordering"
        assert error.context["rule"] == "ordering"

    def test_format_error_context(self):
        error = AnalyticsFormatError("bad line", path="a.txt", line_number=2)
        assert error.context == {"path": "a.txt", "line_number": 2}
