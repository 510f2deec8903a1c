"""Enable/disable switch for direct user input."""

from __future__ import annotations

import logging
import threading
from typing import Protocol

logger = logging.getLogger(__name__)


class InputController(Protocol):
    """What the autoplay scheduler toggles on the caller's input layer."""

    def disable_user_input(self) -> None: ...

    def enable_user_input(self) -> None: ...


class InputGate:
    """Thread-safe input flag that also counts its transitions.

    ``enable_count`` and ``disable_count`` only count calls that changed the
    flag, so repeated enables while already enabled are not double counted.
    """

    def __init__(self, enabled: bool = True) -> None:
        self._lock = threading.Lock()
        self._enabled = enabled
        self.enable_count = 0
        self.disable_count = 0

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def allow(self, allowed: bool) -> None:
        if allowed:
            self.enable_user_input()
        else:
            self.disable_user_input()

    def disable_user_input(self) -> None:
        with self._lock:
            if not self._enabled:
                return
            self._enabled = False
            self.disable_count += 1
        logger.debug("User input disabled")

    def enable_user_input(self) -> None:
        with self._lock:
            if self._enabled:
                return
            self._enabled = True
            self.enable_count += 1
        logger.debug("User input enabled")
