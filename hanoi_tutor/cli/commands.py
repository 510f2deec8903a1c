#!/usr/bin/env python3
"""
Hanoi Tutor CLI

Usage:
    # Print the optimal solution for four disks
    hanoi-tutor solve --disks 4

    # Let autoplay solve a three-disk game, one move every 200 ms
    hanoi-tutor play --disks 3 --interval-ms 200

    # Show accumulated analytics
    hanoi-tutor stats --json
"""

from __future__ import annotations

import argparse
import json
import sys
import threading
import time
from typing import List, Optional, Sequence

from hanoi_tutor.analytics import AnalyticsStore
from hanoi_tutor.config import GameConfig
from hanoi_tutor.core.logging_config import configure_third_party_loggers, get_logger, setup_logging
from hanoi_tutor.errors import HanoiTutorError
from hanoi_tutor.game_session import GameSession
from hanoi_tutor.models import AnimationEvent, TowerEvent, TowerEventType
from hanoi_tutor.tower_state import validate_disk_count
from hanoi_tutor.tutor import solve

logger = get_logger(__name__)

# Extra wait on top of the nominal play time before giving up.
PLAY_TIMEOUT_SLACK_SECONDS = 5.0


def format_towers(towers: Sequence[Sequence[int]]) -> str:
    """One line per tower, bottom first, e.g. ``0 | 3 2 1``."""
    lines = []
    for index, tower in enumerate(towers):
        disks = " ".join(str(disk) for disk in tower)
        lines.append(f"{index} | {disks}".rstrip())
    return "\n".join(lines)


def cmd_solve(args: argparse.Namespace, config: GameConfig) -> int:
    """Print the optimal move sequence."""
    disk_count = validate_disk_count(args.disks if args.disks is not None else config.disk_count)
    moves = solve(disk_count, 0, args.target)
    for number, move in enumerate(moves, start=1):
        print(f"{number:4d}. disk {move.disk}: {move.from_tower} -> {move.to_tower}")
    print(f"\n{len(moves)} moves for {disk_count} disks")
    return 0


def cmd_play(args: argparse.Namespace, config: GameConfig) -> int:
    """Run a headless autoplay game to completion."""
    updates = {}
    if args.disks is not None:
        updates["disk_count"] = validate_disk_count(args.disks)
    if args.interval_ms is not None:
        updates["autoplay_interval_ms"] = args.interval_ms
    config = config.model_copy(update={**updates, "tutor_enabled": True})

    store = None if args.no_save else AnalyticsStore(args.analytics_path or config.analytics_path)
    finished = threading.Event()

    def on_tower_event(event: TowerEvent) -> None:
        if event.move is None:
            return
        print(f"Move {event.move.to_notation()}")
        print(format_towers(session.towers()))
        if event.type == TowerEventType.WON:
            print("Solved!")

    def on_animation_event(event: AnimationEvent) -> None:
        if session.is_won and session.scheduler.is_idle:
            finished.set()

    with GameSession(config, analytics=store) as session:
        session.tower_state.events.subscribe(on_tower_event)
        session.tracker.events.subscribe(on_animation_event)
        session.start()
        print(format_towers(session.towers()))

        expected = (2 ** config.disk_count - 1) * config.autoplay_interval_ms / 1000.0
        deadline = time.monotonic() + expected + PLAY_TIMEOUT_SLACK_SECONDS
        session.toggle_autoplay()
        while not finished.wait(0.05):
            if session.is_won and session.scheduler.is_idle and not session.tracker.is_any_running():
                break
            if time.monotonic() > deadline:
                logger.error("Autoplay did not finish within %.1fs", expected + PLAY_TIMEOUT_SLACK_SECONDS)
                return 1

        print(
            f"\n{session.tower_state.total_move_count()} moves, "
            f"{session.tower_state.optimal_move_count()} optimal"
        )

    if store is not None:
        if session.last_snapshot is None:
            print(f"Analytics could not be saved to {store.path}", file=sys.stderr)
        else:
            print(f"Analytics saved to {store.path}")
    return 0


def cmd_stats(args: argparse.Namespace, config: GameConfig) -> int:
    """Print accumulated analytics."""
    store = AnalyticsStore(args.analytics_path or config.analytics_path)
    snapshot = store.load()

    if args.json:
        print(json.dumps(snapshot.model_dump(), indent=2))
        return 0

    print(f"\n{'=' * 40}")
    print("  HANOI TUTOR ANALYTICS")
    print(f"{'=' * 40}")
    print(f"  Optimal moves:    {snapshot.optimal_moves}")
    print(f"  Unoptimal moves:  {snapshot.unoptimal_moves}")
    print(f"  Time played:      {snapshot.elapsed_seconds}s")
    history = ", ".join(str(value) for value in snapshot.optimal_moves_over_time) or "-"
    print(f"  Optimal history:  {history}")
    print(f"{'=' * 40}\n")
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also append log records to this file",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hanoi-tutor",
        description="Tower of Hanoi tutor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  solve   Print the optimal solution
  play    Solve a game with autoplay, printing every move
  stats   Show accumulated analytics

Examples:
  %(prog)s solve --disks 5
  %(prog)s play --disks 4 --interval-ms 100
  %(prog)s stats --json
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    solve_parser = subparsers.add_parser("solve", help="Print the optimal solution")
    solve_parser.add_argument(
        "--disks", type=int, default=None,
        help="Number of disks, 3-10 (default: HANOI_TUTOR_DISK_COUNT or 3)",
    )
    solve_parser.add_argument(
        "--target", type=int, choices=[1, 2], default=2,
        help="Destination tower (default: 2)",
    )
    add_common_args(solve_parser)

    play_parser = subparsers.add_parser("play", help="Autoplay a game")
    play_parser.add_argument(
        "--disks", type=int, default=None,
        help="Number of disks, 3-10 (default: HANOI_TUTOR_DISK_COUNT or 3)",
    )
    play_parser.add_argument(
        "--interval-ms", type=int, default=None,
        help="Milliseconds between moves (default: HANOI_TUTOR_AUTOPLAY_INTERVAL_MS or 1000)",
    )
    play_parser.add_argument(
        "--analytics-path", default=None,
        help="Analytics file (default: HANOI_TUTOR_ANALYTICS_PATH or analytics.txt)",
    )
    play_parser.add_argument(
        "--no-save", action="store_true",
        help="Don't write analytics",
    )
    add_common_args(play_parser)

    stats_parser = subparsers.add_parser("stats", help="Show analytics")
    stats_parser.add_argument(
        "--analytics-path", default=None,
        help="Analytics file (default: HANOI_TUTOR_ANALYTICS_PATH or analytics.txt)",
    )
    stats_parser.add_argument("--json", action="store_true", help="JSON output")
    add_common_args(stats_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = GameConfig.from_env()
    except HanoiTutorError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(
        "hanoi_tutor",
        level="DEBUG" if args.verbose else config.log_level,
        log_file=args.log_file,
        format_style="compact",
    )
    configure_third_party_loggers(quiet=not args.verbose)

    commands = {
        "solve": cmd_solve,
        "play": cmd_play,
        "stats": cmd_stats,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1
    try:
        return handler(args, config)
    except HanoiTutorError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


def main_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
