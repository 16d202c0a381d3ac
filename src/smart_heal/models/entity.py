from __future__ import annotations

import threading
import uuid
from typing import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field

from smart_heal.mechanics.catalog import StatusEffectCatalog, as_tag
from smart_heal.mechanics.healing_math import group_heal_percent, heal_result

OverhealListener = Callable[["Entity", int, int], None]

_DEFAULT_CATALOG = StatusEffectCatalog()


class InvalidBounds(ValueError):
    """Health or max health set outside its legal range."""


class EntitySnapshot(BaseModel):
    """Read-only view of an entity for presentation layers."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    health: int
    max_health: int
    overheal: int = 0
    team: str = ""
    status_effects: list[str] = Field(default_factory=list)
    party_ids: list[str] = Field(default_factory=list)
    is_player: bool = False
    active_heal_button: str | None = None
    cooldown_remaining_ms: float = 0.0


class Entity:
    """A healable unit: health, overheal, team and status effects grouped by color."""

    def __init__(
        self,
        name: str,
        health: int,
        max_health: int,
        team: str,
        catalog: StatusEffectCatalog | None = None,
        id: str | None = None,
    ) -> None:
        if max_health < 0:
            raise InvalidBounds(f"Max health can't be negative: {max_health}")
        if health < 0 or health > max_health:
            raise InvalidBounds(f"Health {health} outside 0..{max_health}")
        self.id = id or str(uuid.uuid4())
        self.name = name
        self.team = team
        self.catalog = catalog or _DEFAULT_CATALOG
        self.party: list[Entity] = [self]
        # Held for the whole read-decide-mutate sequence of a heal attempt
        self.lock = threading.RLock()
        self._health = health
        self._max_health = max_health
        self._overheal = 0
        self._status_effects: dict[str, set[str]] = {}
        self._overheal_listeners: list[OverhealListener] = []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} {self._health}/{self._max_health} +{self._overheal}>"

    # -- Health --

    @property
    def health(self) -> int:
        return self._health

    @property
    def max_health(self) -> int:
        return self._max_health

    def set_health(self, value: int) -> None:
        with self.lock:
            if value < 0:
                raise InvalidBounds(f"Health can't be negative: {value}")
            if value > self._max_health:
                raise InvalidBounds(f"Health {value} is greater than max health {self._max_health}")
            self._health = value

    def set_max_health(self, value: int) -> None:
        with self.lock:
            if value < 0:
                raise InvalidBounds(f"Max health can't be negative: {value}")
            if value < self._health:
                raise InvalidBounds(f"Max health {value} is less than current health {self._health}")
            self._max_health = value

    def heal_health(self, percent: float) -> int:
        """Heal *percent* of max health. Excess past max becomes overheal; returns that excess."""
        with self.lock:
            new_health, excess = heal_result(self._health, self._max_health, percent)
            self._health = new_health
            if excess:
                self.add_overheal(excess)
            return excess

    @staticmethod
    def heal_health_group(entities: list[Entity], base_percent: float, reduction_percent: float) -> float:
        """Heal every member by the group-scaled percent. Returns the percent applied."""
        percent = group_heal_percent(base_percent, len(entities), reduction_percent)
        for member in entities:
            member.heal_health(percent)
        return percent

    # -- Overheal --

    @property
    def overheal(self) -> int:
        return self._overheal

    def add_overheal(self, amount: int) -> None:
        if amount < 0:
            raise InvalidBounds(f"Overheal gain can't be negative: {amount}")
        with self.lock:
            old = self._overheal
            self._overheal = old + amount
        self._notify_overheal(old, old + amount)

    def decay_overheal(self, decay: Callable[[int], int]) -> tuple[int, int]:
        """Apply *decay* to the current overheal. Returns (old, new)."""
        with self.lock:
            old = self._overheal
            new = max(0, int(decay(old)))
            self._overheal = new
        if new != old:
            self._notify_overheal(old, new)
        return old, new

    def add_overheal_listener(self, listener: OverhealListener) -> None:
        self._overheal_listeners.append(listener)

    def remove_overheal_listener(self, listener: OverhealListener) -> None:
        if listener in self._overheal_listeners:
            self._overheal_listeners.remove(listener)

    def _notify_overheal(self, old: int, new: int) -> None:
        for listener in list(self._overheal_listeners):
            listener(self, old, new)

    # -- Status effects --

    def add_status_effect(self, kind: str) -> None:
        tag = as_tag(kind)
        color = self.catalog.color_of(tag)
        with self.lock:
            self._status_effects.setdefault(color, set()).add(tag)

    def remove_status_effect(self, kind: str) -> bool:
        """Remove *kind* if present. Returns whether anything was removed."""
        tag = as_tag(kind)
        color = self.catalog.color_of(tag)
        with self.lock:
            bucket = self._status_effects.get(color)
            if not bucket or tag not in bucket:
                return False
            bucket.discard(tag)
            return True

    def has_status_effect(self, kind: str) -> bool:
        tag = as_tag(kind)
        return tag in self._status_effects.get(self.catalog.color_of(tag), ())

    def all_status_effects(self) -> set[str]:
        with self.lock:
            return {kind for bucket in self._status_effects.values() for kind in bucket}

    def status_effects_of_color(self, color: str) -> set[str]:
        with self.lock:
            return set(self._status_effects.get(as_tag(color), ()))

    # -- Healability --

    def is_healable_by(self, healer: Entity) -> bool:
        if self.team != healer.team:
            return False
        return not any(self.has_status_effect(kind) for kind in self.catalog.unhealable_kinds)

    def healable_party_members(self) -> list[Entity]:
        return [member for member in self.party if member.is_healable_by(self)]

    # -- Views --

    def snapshot(self) -> EntitySnapshot:
        with self.lock:
            return EntitySnapshot(
                id=self.id,
                name=self.name,
                health=self._health,
                max_health=self._max_health,
                overheal=self._overheal,
                team=self.team,
                status_effects=sorted(self.all_status_effects()),
                party_ids=[member.id for member in self.party],
            )


def form_party(members: Iterable[Entity]) -> list[Entity]:
    """Give every member the same party list."""
    party = list(members)
    for member in party:
        member.party = party
    return party
