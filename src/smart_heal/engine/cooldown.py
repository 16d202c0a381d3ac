"""One shared lockout for all of a player's heal buttons."""
from __future__ import annotations

import logging
import threading
from typing import Callable

from smart_heal.engine.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class CooldownGate:
    """Unlocked -> Locked(duration) -> Unlocked.

    ``lock`` always replaces the timer in flight: last call wins, no stacking.
    """

    def __init__(self, scheduler: Scheduler, on_unlock: Callable[[], None] | None = None) -> None:
        self._scheduler = scheduler
        self.on_unlock = on_unlock
        self._lock = threading.RLock()
        self._handle: TimerHandle | None = None
        self._locked = False
        self._locked_at = 0.0
        self._generation = 0
        self.locked_for_ms = 0

    @property
    def is_available(self) -> bool:
        return not self._locked

    @property
    def remaining_ms(self) -> float:
        with self._lock:
            if not self._locked:
                return 0.0
            elapsed = self._scheduler.now() - self._locked_at
            return max(0.0, self.locked_for_ms - elapsed)

    def lock(self, duration_ms: int) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self.locked_for_ms = duration_ms
            self._locked_at = self._scheduler.now()
            self._locked = True
            self._handle = self._scheduler.call_later(duration_ms, lambda: self._unlock(generation))

    def cancel(self) -> None:
        """Drop any pending timer and unlock without notifying."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            self._generation += 1
            self._locked = False

    def _unlock(self, generation: int) -> None:
        with self._lock:
            # A newer lock() replaced this timer
            if generation != self._generation:
                return
            self._handle = None
            self._locked = False
        logger.debug("Cooldown of %d ms elapsed", self.locked_for_ms)
        if self.on_unlock is not None:
            self.on_unlock()
