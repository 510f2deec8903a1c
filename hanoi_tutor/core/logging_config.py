"""Unified logging configuration for the Hanoi tutor.

Usage:
    from hanoi_tutor.core.logging_config import setup_logging

    logger = setup_logging("hanoi_tutor", level="DEBUG", log_file="play.log")

Module code never configures handlers itself; it only calls
``logging.getLogger(__name__)``. Entry points call ``setup_logging`` once
for the ``hanoi_tutor`` logger, and every module logger inherits from it.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
COMPACT_FORMAT = "%(levelname)s %(name)s: %(message)s"

_FORMATS = {
    "default": DEFAULT_FORMAT,
    "compact": COMPACT_FORMAT,
}

# Libraries whose INFO chatter is not useful next to game logs.
NOISY_PACKAGES = ("asyncio", "concurrent.futures", "prometheus_client")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def setup_logging(
    name: str = "hanoi_tutor",
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    format_style: str = "default",
    propagate: bool = False,
) -> logging.Logger:
    """Configure and return a named logger.

    Calling this again for the same name updates the level but never adds
    a second handler of the same kind.

    Args:
        name: Logger name, usually the package name.
        level: Level as an int or a name such as "DEBUG".
        log_file: Optional file to append log records to.
        console: Attach a stderr handler.
        format_style: Either default or compact.
        propagate: Pass records on to the root logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))
    logger.propagate = propagate

    formatter = logging.Formatter(_FORMATS.get(format_style, DEFAULT_FORMAT))

    if console and not any(
        type(h) is logging.StreamHandler for h in logger.handlers
    ):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if log_file is not None:
        path = Path(log_file).resolve()
        if not any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == path
            for h in logger.handlers
        ):
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_third_party_loggers(quiet: bool = True) -> None:
    """Raise noisy library loggers to WARNING."""
    if not quiet:
        return
    for package in NOISY_PACKAGES:
        logging.getLogger(package).setLevel(logging.WARNING)
