"""Prometheus metrics for the Hanoi Tutor game core.

This module centralises counters and gauges so that TowerState, the
animation layer and the autoplay scheduler can record lightweight
telemetry without each component managing its own metric instances.
Nothing is exported over HTTP here; hosts that want a scrape endpoint can
serve the default registry themselves.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import REGISTRY, Counter, Gauge


def _safe_metric(metric_class, name, doc, **kwargs):
    """Create metric or get existing one."""
    if name in REGISTRY._names_to_collectors:
        return REGISTRY._names_to_collectors[name]
    return metric_class(name, doc, **kwargs)


MOVES_APPLIED: Final[Counter] = _safe_metric(
    Counter,
    "hanoi_moves_applied_total",
    "Total moves appended to the move log, labeled by validity.",
    labelnames=("validity",),
)

MOVES_UNDONE: Final[Counter] = _safe_metric(
    Counter,
    "hanoi_moves_undone_total",
    "Total valid moves reverted through undo.",
)

GAMES_WON: Final[Counter] = _safe_metric(
    Counter,
    "hanoi_games_won_total",
    "Total games won, labeled by disk count.",
    labelnames=("disk_count",),
)

AUTOPLAY_TICKS: Final[Counter] = _safe_metric(
    Counter,
    "hanoi_autoplay_ticks_total",
    "Total autoplay ticks, labeled by outcome (applied, cancelled, exhausted).",
    labelnames=("outcome",),
)

ANIMATIONS_IN_FLIGHT: Final[Gauge] = _safe_metric(
    Gauge,
    "hanoi_animations_in_flight",
    "Current number of registered, not yet completed animations.",
)

AUTOPLAY_RUNNING: Final[Gauge] = _safe_metric(
    Gauge,
    "hanoi_autoplay_running",
    "Whether the autoplay scheduler is issuing moves (1=running, 0=not).",
)


def record_move_applied(valid: bool) -> None:
    """Count one move appended to the log."""
    MOVES_APPLIED.labels("valid" if valid else "invalid").inc()


def record_game_won(disk_count: int) -> None:
    """Count one finished game."""
    GAMES_WON.labels(str(disk_count)).inc()


def record_autoplay_tick(outcome: str) -> None:
    """Count one autoplay tick and its outcome."""
    AUTOPLAY_TICKS.labels(outcome).inc()
