from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class TargetMode(str, Enum):
    STATUS_EFFECT = "status_effect"
    ENTITY = "entity"
    UNTARGETED = "untargeted"


@dataclass(frozen=True)
class StatusEffectTarget:
    """A click on one status effect icon of an entity's frame."""

    entity_id: str
    kind: str
    mode: TargetMode = field(default=TargetMode.STATUS_EFFECT, init=False)


@dataclass(frozen=True)
class EntityTarget:
    """A click on an entity (its frame or the unit itself)."""

    entity_id: str
    mode: TargetMode = field(default=TargetMode.ENTITY, init=False)


@dataclass(frozen=True)
class Untargeted:
    """A click on nothing in particular: the heal goes to the caster's party."""

    mode: TargetMode = field(default=TargetMode.UNTARGETED, init=False)


TargetSpec = Union[StatusEffectTarget, EntityTarget, Untargeted]


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    # Nothing healed, brief penalty cooldown armed
    FAILED = "failed"
    # Not healable (team, stasis, unknown target); no cooldown
    REJECTED = "rejected"
    ON_COOLDOWN = "on_cooldown"


@dataclass
class EntityChange:
    entity_id: str
    health_before: int = 0
    health_after: int = 0
    overheal_before: int = 0
    overheal_after: int = 0
    removed_effects: list[str] = field(default_factory=list)

    @property
    def health_delta(self) -> int:
        return self.health_after - self.health_before

    @property
    def overheal_delta(self) -> int:
        return self.overheal_after - self.overheal_before

    @property
    def changed(self) -> bool:
        return bool(self.health_delta or self.overheal_delta or self.removed_effects)


@dataclass
class HealOutcome:
    player_id: str
    button: str | None
    target_mode: TargetMode
    status: OutcomeStatus
    cooldown_ms: int | None = None
    changes: list[EntityChange] = field(default_factory=list)
    reason: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == OutcomeStatus.FAILED

    @property
    def rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @property
    def on_cooldown(self) -> bool:
        return self.status == OutcomeStatus.ON_COOLDOWN

    def change_for(self, entity_id: str) -> EntityChange | None:
        for change in self.changes:
            if change.entity_id == entity_id:
                return change
        return None
