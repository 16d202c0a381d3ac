"""Cancellable delayed callbacks on a real or simulated clock.

Cooldowns and overheal decay depend on the ``Scheduler`` interface only, so
tests and the CLI can run them on a simulated clock.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


class TimerHandle:
    """Returned by ``call_later``; cancelling a fired or cancelled timer is a no-op."""

    def __init__(self, when: float, cancel: Callable[[], None] | None = None) -> None:
        self.when = when
        self.cancelled = False
        self._cancel = cancel

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._cancel is not None:
            self._cancel()


class Scheduler(ABC):
    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


@dataclass(order=True)
class _ScheduledCall:
    when: float
    order: int
    callback: Callable[[], None] = field(compare=False)
    handle: TimerHandle = field(compare=False)


class SimulatedScheduler(Scheduler):
    """Virtual clock. Nothing fires until ``advance`` moves time forward."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._queue: list[_ScheduledCall] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        when = self._now + max(delay_ms, 0)
        handle = TimerHandle(when)
        heapq.heappush(self._queue, _ScheduledCall(when, next(self._counter), callback, handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for call in self._queue if not call.handle.cancelled)

    def advance(self, delta_ms: float) -> None:
        """Move the clock forward, firing due callbacks in time order.

        Callbacks scheduled by other callbacks fire too if they fall inside
        the window.
        """
        target = self._now + delta_ms
        while self._queue and self._queue[0].when <= target:
            call = heapq.heappop(self._queue)
            if call.handle.cancelled:
                continue
            self._now = call.when
            call.handle.cancelled = True
            call.callback()
        self._now = target


class ThreadScheduler(Scheduler):
    """Wall-clock scheduler backed by ``threading.Timer``."""

    def __init__(self) -> None:
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    def now(self) -> float:
        return time.monotonic() * 1000

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        timer: threading.Timer

        def fire() -> None:
            with self._lock:
                self._timers.discard(timer)
            if handle.cancelled:
                return
            handle.cancelled = True
            try:
                callback()
            except Exception:
                logger.exception("Scheduled callback failed")

        def cancel() -> None:
            timer.cancel()
            with self._lock:
                self._timers.discard(timer)

        timer = threading.Timer(max(delay_ms, 0) / 1000, fire)
        timer.daemon = True
        handle = TimerHandle(self.now() + max(delay_ms, 0), cancel)
        with self._lock:
            self._timers.add(timer)
        timer.start()
        return handle

    def shutdown(self) -> None:
        """Cancel every outstanding timer."""
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
