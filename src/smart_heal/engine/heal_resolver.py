"""Decides what a heal attempt does and what cooldown it costs.

One attempt runs exactly one branch of (button x target) and arms at most one
cooldown on the caster's gate:

    button      status effect icon     entity                    untargeted
    tricolor    cure it                cure random / heal        per member, group %
    red         (rejected)             heal                      group heal
    color       cure if colors match   cure random of color      cure one per member

Rejected attempts (unhealable target) change nothing and arm nothing. Failed
attempts change nothing and arm the brief wrong-color penalty. Clicking an icon
the target does not have fails the same way as a color mismatch.
"""
from __future__ import annotations

import logging
import random
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Iterable, Mapping

from smart_heal.mechanics.catalog import StatusEffectCatalog, UnregisteredColor, as_tag
from smart_heal.mechanics.healing_math import group_heal_percent
from smart_heal.mechanics.tuning import HealTuning
from smart_heal.models.entity import Entity
from smart_heal.models.heal import (
    EntityChange,
    HealOutcome,
    OutcomeStatus,
    StatusEffectTarget,
    TargetSpec,
    Untargeted,
)
from smart_heal.models.player import Player

logger = logging.getLogger(__name__)


@dataclass
class _Verdict:
    status: OutcomeStatus
    cooldown_ms: int | None = None
    reason: str = ""


def _success(cooldown_ms: int) -> _Verdict:
    return _Verdict(OutcomeStatus.SUCCESS, cooldown_ms)


def _rejected(reason: str) -> _Verdict:
    return _Verdict(OutcomeStatus.REJECTED, None, reason)


class HealResolver:
    def __init__(
        self,
        catalog: StatusEffectCatalog,
        tuning: HealTuning,
        entities: Mapping[str, Entity],
        rng: random.Random | None = None,
    ) -> None:
        self.catalog = catalog
        self.tuning = tuning
        self.entities = entities
        self.rng = rng or random.Random()

    def resolve(self, player: Player, button: str, target: TargetSpec) -> HealOutcome:
        button = as_tag(button)
        if not self.catalog.is_registered_button(button):
            raise UnregisteredColor(button)
        if isinstance(target, StatusEffectTarget):
            self.catalog.color_of(target.kind)

        involved = self._involved_entities(player, target)
        with ExitStack() as stack:
            for entity in sorted(involved, key=lambda e: e.id):
                stack.enter_context(entity.lock)

            if not player.cooldown.is_available:
                return HealOutcome(
                    player_id=player.id,
                    button=button,
                    target_mode=target.mode,
                    status=OutcomeStatus.ON_COOLDOWN,
                    reason="healing is on cooldown",
                )

            before = {e.id: (e.health, e.overheal, e.all_status_effects()) for e in involved}
            verdict = self._dispatch(player, button, target)
            if verdict.status in (OutcomeStatus.SUCCESS, OutcomeStatus.FAILED):
                player.cooldown.lock(verdict.cooldown_ms)
            changes = self._collect_changes(involved, before)

        logger.debug(
            "%s used %s on %s: %s (cooldown %s) %s",
            player.name, button, target.mode.value, verdict.status.value,
            verdict.cooldown_ms, verdict.reason,
        )
        return HealOutcome(
            player_id=player.id,
            button=button,
            target_mode=target.mode,
            status=verdict.status,
            cooldown_ms=verdict.cooldown_ms,
            changes=changes,
            reason=verdict.reason,
        )

    # -- Dispatch --

    def _dispatch(self, player: Player, button: str, target: TargetSpec) -> _Verdict:
        if isinstance(target, Untargeted):
            return self._party_heal(player, button)

        entity = self.entities.get(target.entity_id)
        if entity is None:
            return _rejected(f"unknown target '{target.entity_id}'")
        if not entity.is_healable_by(player):
            if entity is player:
                return _rejected("you can't heal yourself (stasis prevents healing)")
            return _rejected(f"{entity.name} can't be healed (stasis or another team)")

        if isinstance(target, StatusEffectTarget):
            if self.catalog.is_health_button(button):
                return _rejected("red heals can't target a status effect")
            return self._status_effect_heal(entity, button, target.kind)
        return self._entity_heal(entity, button)

    def _status_effect_heal(self, entity: Entity, button: str, kind: str) -> _Verdict:
        t = self.tuning
        universal = self.catalog.is_universal(button)
        if not universal and self.catalog.color_of(kind) != self.catalog.cures_color(button):
            return _Verdict(OutcomeStatus.FAILED, t.wrong_color_cooldown_ms, f"{button} heals can't cure {kind}")
        if not entity.remove_status_effect(kind):
            return _Verdict(OutcomeStatus.FAILED, t.wrong_color_cooldown_ms, f"{entity.name} isn't {kind}")
        if universal:
            return _success(t.tricolor_status_effect_cooldown_ms)
        return _success(t.color_status_effect_cooldown_ms)

    def _entity_heal(self, entity: Entity, button: str) -> _Verdict:
        t = self.tuning
        if self.catalog.is_universal(button):
            self._cure_random_or_heal(entity, t.tricolor_target_percent)
            return _success(t.tricolor_target_cooldown_ms)
        if self.catalog.is_health_button(button):
            entity.heal_health(t.red_target_percent)
            return _success(t.red_target_cooldown_ms)
        color = self.catalog.cures_color(button)
        if not self._cure_random(entity, entity.status_effects_of_color(color)):
            return _Verdict(
                OutcomeStatus.FAILED,
                t.wrong_color_cooldown_ms,
                f"{entity.name} has no {color} status effects",
            )
        return _success(t.color_target_cooldown_ms)

    def _party_heal(self, player: Player, button: str) -> _Verdict:
        t = self.tuning
        members = player.healable_party_members()
        if not members:
            return _rejected("no one in your party is healable (stasis or another team)")
        if len(members) == 1:
            # Solitary heal keeps the single-target cooldown
            return self._entity_heal(members[0], button)

        if self.catalog.is_universal(button):
            percent = group_heal_percent(
                t.tricolor_party_percent, len(members), t.heal_percent_reduction_per_target
            )
            for member in members:
                self._cure_random_or_heal(member, percent)
            return _success(t.tricolor_party_cooldown_ms)

        if self.catalog.is_health_button(button):
            Entity.heal_health_group(members, t.red_party_percent, t.heal_percent_reduction_per_target)
            return _success(t.red_party_cooldown_ms)

        color = self.catalog.cures_color(button)
        healed_something = False
        for member in members:
            if self._cure_random(member, member.status_effects_of_color(color)):
                healed_something = True
        if not healed_something:
            return _Verdict(
                OutcomeStatus.FAILED,
                t.wrong_color_cooldown_ms,
                f"no one in your party has {color} status effects",
            )
        return _success(t.color_party_cooldown_ms)

    # -- Helpers --

    def _cure_random(self, entity: Entity, effects: Iterable[str]) -> bool:
        candidates = sorted(effects)
        if not candidates:
            return False
        entity.remove_status_effect(self.rng.choice(candidates))
        return True

    def _cure_random_or_heal(self, entity: Entity, percent: float) -> None:
        if not self._cure_random(entity, entity.all_status_effects()):
            entity.heal_health(percent)

    def _involved_entities(self, player: Player, target: TargetSpec) -> list[Entity]:
        involved: dict[str, Entity] = {player.id: player}
        if isinstance(target, Untargeted):
            for member in player.party:
                involved.setdefault(member.id, member)
        else:
            entity = self.entities.get(target.entity_id)
            if entity is not None:
                involved.setdefault(entity.id, entity)
        return list(involved.values())

    @staticmethod
    def _collect_changes(
        involved: list[Entity], before: dict[str, tuple[int, int, set[str]]]
    ) -> list[EntityChange]:
        changes: list[EntityChange] = []
        for entity in involved:
            health, overheal, effects = before[entity.id]
            change = EntityChange(
                entity_id=entity.id,
                health_before=health,
                health_after=entity.health,
                overheal_before=overheal,
                overheal_after=entity.overheal,
                removed_effects=sorted(effects - entity.all_status_effects()),
            )
            if change.changed:
                changes.append(change)
        return changes
