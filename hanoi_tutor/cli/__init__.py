"""Command-line front end for the Hanoi tutor.

Usage:
    hanoi-tutor solve --disks 4
    hanoi-tutor play --disks 3 --interval-ms 200
    hanoi-tutor stats --json
"""

from hanoi_tutor.cli.commands import format_towers, main, main_entry

__all__ = [
    "format_towers",
    "main",
    "main_entry",
]
