"""Cumulative play analytics kept in a small line-oriented text file.

File layout, one integer per line::

    <optimal move count>
    <unoptimal move count>
    <elapsed seconds>
    <optimal count after session 1>
    <optimal count after session 2>
    ...

A missing file means no prior session and loads as all zeros. Blank
trailing lines are ignored; any other line that is not an integer is a
format error.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Union

from .errors import AnalyticsFormatError, StorageError
from .models import AnalyticsSnapshot

logger = logging.getLogger(__name__)

DEFAULT_ANALYTICS_PATH = "analytics.txt"

_HEADER_FIELDS = ("optimal_moves", "unoptimal_moves", "elapsed_seconds")


class AnalyticsStore:
    """Reads and writes an ``AnalyticsSnapshot`` at a fixed path."""

    def __init__(self, path: Union[str, Path] = DEFAULT_ANALYTICS_PATH) -> None:
        self.path = Path(path)

    def load(self) -> AnalyticsSnapshot:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No analytics file at %s; starting from zero", self.path)
            return AnalyticsSnapshot()
        except OSError as e:
            raise StorageError(f"Cannot read analytics file: {e}", path=str(self.path)) from e

        values = self._parse(text)
        header = dict(zip(_HEADER_FIELDS, values[:3]))
        return AnalyticsSnapshot(**header, optimal_moves_over_time=values[3:])

    def save(self, snapshot: AnalyticsSnapshot) -> None:
        lines = [
            snapshot.optimal_moves,
            snapshot.unoptimal_moves,
            snapshot.elapsed_seconds,
            *snapshot.optimal_moves_over_time,
        ]
        payload = "".join(f"{value}\n" for value in lines)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            if self.path.parent != Path("."):
                self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write analytics file: {e}", path=str(self.path)) from e
        logger.debug("Saved analytics to %s", self.path)

    @staticmethod
    def accumulate(
        previous: AnalyticsSnapshot,
        optimal: int,
        unoptimal: int,
        elapsed_seconds: int,
    ) -> AnalyticsSnapshot:
        """Add one session to the running totals.

        The new optimal total is appended to the history, so the history
        grows by exactly one entry per recorded session.
        """
        optimal_total = previous.optimal_moves + optimal
        return AnalyticsSnapshot(
            optimal_moves=optimal_total,
            unoptimal_moves=previous.unoptimal_moves + unoptimal,
            elapsed_seconds=previous.elapsed_seconds + elapsed_seconds,
            optimal_moves_over_time=[*previous.optimal_moves_over_time, optimal_total],
        )

    def record_session(self, optimal: int, unoptimal: int, elapsed_seconds: float) -> AnalyticsSnapshot:
        """Load, accumulate one session and save. Returns the saved snapshot."""
        snapshot = self.accumulate(self.load(), optimal, unoptimal, int(elapsed_seconds))
        self.save(snapshot)
        logger.info(
            "Recorded session: %d optimal, %d unoptimal, %ds (totals %d/%d)",
            optimal,
            unoptimal,
            int(elapsed_seconds),
            snapshot.optimal_moves,
            snapshot.unoptimal_moves,
        )
        return snapshot

    def _parse(self, text: str) -> List[int]:
        lines = text.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        values: List[int] = []
        for line_number, line in enumerate(lines, start=1):
            try:
                value = int(line.strip())
            except ValueError:
                raise AnalyticsFormatError(
                    f"Line {line_number} is not an integer: {line!r}",
                    path=str(self.path),
                    line_number=line_number,
                ) from None
            if value < 0:
                raise AnalyticsFormatError(
                    f"Line {line_number} holds a negative count: {value}",
                    path=str(self.path),
                    line_number=line_number,
                )
            values.append(value)
        return values
