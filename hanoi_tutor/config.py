"""
Game configuration from environment variables.

Environment Variables:
    HANOI_TUTOR_DISK_COUNT: Disks in a new game, 3..10 (default: 3)
    HANOI_TUTOR_AUTOPLAY_INTERVAL_MS: Autoplay tick interval, > 0 (default: 1000)
    HANOI_TUTOR_ANIMATION_FRACTION: Share of the interval an animation lasts,
        in (0, 1] (default: 0.9)
    HANOI_TUTOR_TUTOR_ENABLED: Tutor mode on/off (default: on)
    HANOI_TUTOR_ANALYTICS_PATH: Analytics file (default: analytics.txt)
    HANOI_TUTOR_LOG_LEVEL: Root log level (default: INFO)

Values that cannot be parsed fall back to the default. Values that parse
but are out of range raise InvalidConfigurationError.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from .analytics import DEFAULT_ANALYTICS_PATH
from .autoplay import DEFAULT_ANIMATION_FRACTION
from .errors import InvalidConfigurationError
from .models import MAX_DISKS, MIN_DISKS
from .tower_state import validate_disk_count

logger = logging.getLogger(__name__)

ENV_PREFIX = "HANOI_TUTOR_"

DEFAULT_DISK_COUNT = MIN_DISKS
DEFAULT_AUTOPLAY_INTERVAL_MS = 1000
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _is_truthy_env(env: Mapping[str, str], name: str) -> bool | None:
    val = env.get(name, "").strip().lower()
    if not val:
        return None
    if val in {"1", "true", "yes", "on"}:
        return True
    if val in {"0", "false", "no", "off"}:
        return False
    return None


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %d", name, raw, default)
        return default


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default


class GameConfig(BaseModel):
    """Settings for one game session"""
    disk_count: int = Field(default=DEFAULT_DISK_COUNT, ge=MIN_DISKS, le=MAX_DISKS)
    autoplay_interval_ms: int = Field(default=DEFAULT_AUTOPLAY_INTERVAL_MS, gt=0)
    animation_fraction: float = Field(default=DEFAULT_ANIMATION_FRACTION, gt=0.0, le=1.0)
    tutor_enabled: bool = True
    analytics_path: str = DEFAULT_ANALYTICS_PATH
    log_level: str = DEFAULT_LOG_LEVEL

    class Config:
        frozen = True

    @property
    def animation_seconds(self) -> float:
        """Duration of one autoplay animation."""
        return self.autoplay_interval_ms / 1000.0 * self.animation_fraction

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GameConfig":
        env = os.environ if env is None else env

        disk_count = _parse_int(env, f"{ENV_PREFIX}DISK_COUNT", DEFAULT_DISK_COUNT)
        validate_disk_count(disk_count)

        interval_ms = _parse_int(
            env, f"{ENV_PREFIX}AUTOPLAY_INTERVAL_MS", DEFAULT_AUTOPLAY_INTERVAL_MS
        )
        if interval_ms <= 0:
            raise InvalidConfigurationError(
                "Autoplay interval must be a positive number of milliseconds",
                setting=f"{ENV_PREFIX}AUTOPLAY_INTERVAL_MS",
                value=interval_ms,
            )

        fraction = _parse_float(env, f"{ENV_PREFIX}ANIMATION_FRACTION", DEFAULT_ANIMATION_FRACTION)
        if not 0.0 < fraction <= 1.0:
            raise InvalidConfigurationError(
                "Animation fraction must be in (0, 1]",
                setting=f"{ENV_PREFIX}ANIMATION_FRACTION",
                value=fraction,
            )

        tutor_enabled = _is_truthy_env(env, f"{ENV_PREFIX}TUTOR_ENABLED")
        if tutor_enabled is None and env.get(f"{ENV_PREFIX}TUTOR_ENABLED", "").strip():
            logger.warning(
                "Ignoring unrecognised %sTUTOR_ENABLED=%r; tutor stays on",
                ENV_PREFIX,
                env[f"{ENV_PREFIX}TUTOR_ENABLED"],
            )

        log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL", "").strip().upper() or DEFAULT_LOG_LEVEL
        if log_level not in _LOG_LEVELS:
            raise InvalidConfigurationError(
                f"Unknown log level; expected one of {sorted(_LOG_LEVELS)}",
                setting=f"{ENV_PREFIX}LOG_LEVEL",
                value=log_level,
            )

        return cls(
            disk_count=disk_count,
            autoplay_interval_ms=interval_ms,
            animation_fraction=fraction,
            tutor_enabled=True if tutor_enabled is None else tutor_enabled,
            analytics_path=env.get(f"{ENV_PREFIX}ANALYTICS_PATH", "").strip() or DEFAULT_ANALYTICS_PATH,
            log_level=log_level,
        )
