"""Shared infrastructure for the Hanoi tutor: logging setup."""

from hanoi_tutor.core.logging_config import (
    COMPACT_FORMAT,
    DEFAULT_FORMAT,
    configure_third_party_loggers,
    get_logger,
    setup_logging,
)

__all__ = [
    "COMPACT_FORMAT",
    "DEFAULT_FORMAT",
    "configure_third_party_loggers",
    "get_logger",
    "setup_logging",
]
