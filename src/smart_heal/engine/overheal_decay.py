"""Per-entity overheal decay timers, armed only while overheal is non-zero."""
from __future__ import annotations

import logging
import threading
from typing import Callable

from smart_heal.engine.scheduler import Scheduler, TimerHandle
from smart_heal.mechanics.healing_math import decay_overheal
from smart_heal.models.entity import Entity

logger = logging.getLogger(__name__)

DecayCallback = Callable[[Entity, int, int], None]


class OverhealDecay:
    """Shrinks each watched entity's overheal once per interval.

    A timer is armed when an entity's overheal rises from zero and re-armed
    after each tick only while overheal remains; idle entities cost nothing.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        interval_ms: int = 1000,
        factor: float = 0.5,
        on_decay: DecayCallback | None = None,
    ) -> None:
        self._scheduler = scheduler
        self.interval_ms = interval_ms
        self.factor = factor
        self._on_decay = on_decay
        self._timers: dict[str, TimerHandle] = {}
        self._watched: dict[str, Entity] = {}
        self._lock = threading.Lock()

    def watch(self, entity: Entity) -> None:
        with self._lock:
            if entity.id in self._watched:
                return
            self._watched[entity.id] = entity
        entity.add_overheal_listener(self._on_overheal_changed)
        if entity.overheal > 0:
            self._arm(entity)

    def cancel(self, entity: Entity) -> None:
        """Stop decaying *entity* (e.g. on removal). Its overheal is left as is."""
        entity.remove_overheal_listener(self._on_overheal_changed)
        with self._lock:
            self._watched.pop(entity.id, None)
            handle = self._timers.pop(entity.id, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        for entity in list(self._watched.values()):
            self.cancel(entity)

    def is_running(self, entity: Entity) -> bool:
        return entity.id in self._timers

    def _on_overheal_changed(self, entity: Entity, old: int, new: int) -> None:
        if new > 0:
            self._arm(entity)

    def _arm(self, entity: Entity) -> None:
        with self._lock:
            if entity.id in self._timers or entity.id not in self._watched:
                return
            self._timers[entity.id] = self._scheduler.call_later(
                self.interval_ms, lambda: self._tick(entity)
            )

    def _tick(self, entity: Entity) -> None:
        with self._lock:
            if self._timers.pop(entity.id, None) is None:
                return
        old, new = entity.decay_overheal(lambda value: decay_overheal(value, self.factor))
        logger.debug("Overheal of %s decayed %d -> %d", entity.name, old, new)
        if self._on_decay is not None and old != new:
            self._on_decay(entity, old, new)
        if entity.overheal > 0:
            self._arm(entity)
