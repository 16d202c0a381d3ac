"""The in-process boundary presentation layers talk to.

Owns the roster, routes heal attempts to the resolver, runs overheal decay and
publishes ``HealEvent`` notifications for every state change.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, Iterable

from smart_heal.engine.heal_resolver import HealResolver
from smart_heal.engine.overheal_decay import OverhealDecay
from smart_heal.engine.scheduler import Scheduler
from smart_heal.mechanics.catalog import StatusEffectCatalog, as_tag
from smart_heal.mechanics.tuning import HealTuning
from smart_heal.models.entity import Entity, EntitySnapshot, form_party
from smart_heal.models.event import EventType, HealEvent
from smart_heal.models.heal import HealOutcome, OutcomeStatus, TargetSpec, Untargeted
from smart_heal.models.player import Player

logger = logging.getLogger(__name__)

EventListener = Callable[[HealEvent], None]

_OUTCOME_EVENTS = {
    OutcomeStatus.SUCCESS: EventType.HEAL_SUCCEEDED,
    OutcomeStatus.FAILED: EventType.HEAL_FAILED,
    OutcomeStatus.REJECTED: EventType.HEAL_REJECTED,
    OutcomeStatus.ON_COOLDOWN: EventType.HEAL_ON_COOLDOWN,
}


class HealingEngine:
    def __init__(
        self,
        catalog: StatusEffectCatalog,
        tuning: HealTuning,
        scheduler: Scheduler,
        rng: random.Random | None = None,
    ) -> None:
        self.catalog = catalog
        self.tuning = tuning
        self.scheduler = scheduler
        self.entities: dict[str, Entity] = {}
        self.resolver = HealResolver(catalog, tuning, self.entities, rng=rng)
        self.decay = OverhealDecay(
            scheduler,
            interval_ms=tuning.overheal_decay_interval_ms,
            factor=tuning.overheal_decay_factor,
            on_decay=self._on_decay,
        )
        self._listeners: list[EventListener] = []

    # -- Notifications --

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _publish(self, event_type: EventType, **fields) -> None:
        event = HealEvent(event_type=event_type, timestamp_ms=self.scheduler.now(), **fields)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener failed on %s", event_type.value)

    # -- Roster --

    def add_entity(self, name: str, health: int, max_health: int, team: str, id: str | None = None) -> Entity:
        entity = Entity(name, health, max_health, team, catalog=self.catalog, id=id)
        return self._register(entity)

    def add_player(self, name: str, health: int, max_health: int, team: str, id: str | None = None) -> Player:
        player = Player(name, health, max_health, team, self.scheduler, catalog=self.catalog, id=id)
        player.cooldown.on_unlock = lambda: self._publish(EventType.COOLDOWN_ENDED, actor_id=player.id)
        self._register(player)
        return player

    def _register(self, entity: Entity) -> Entity:
        if entity.id in self.entities:
            raise ValueError(f"Duplicate entity id: {entity.id}")
        self.entities[entity.id] = entity
        self.decay.watch(entity)
        logger.info("Added %s (%s) to team %s", entity.name, entity.id, entity.team)
        self._publish(EventType.ENTITY_ADDED, target_id=entity.id, description=entity.name)
        return entity

    def remove_entity(self, entity_id: str) -> None:
        entity = self.entities.pop(entity_id)
        self.decay.cancel(entity)
        if isinstance(entity, Player):
            entity.cooldown.cancel()
        for other in self.entities.values():
            if entity in other.party:
                other.party.remove(entity)
        entity.party = [entity]
        logger.info("Removed %s (%s)", entity.name, entity_id)
        self._publish(EventType.ENTITY_REMOVED, target_id=entity_id, description=entity.name)

    def get(self, entity_id: str) -> Entity:
        try:
            return self.entities[entity_id]
        except KeyError:
            raise KeyError(f"Unknown entity: {entity_id}") from None

    def player(self, player_id: str) -> Player:
        entity = self.get(player_id)
        if not isinstance(entity, Player):
            raise KeyError(f"{entity.name} is not a player")
        return entity

    def form_party(self, entity_ids: Iterable[str]) -> list[Entity]:
        return form_party(self.get(entity_id) for entity_id in entity_ids)

    def snapshot(self) -> list[EntitySnapshot]:
        return [entity.snapshot() for entity in self.entities.values()]

    # -- Afflictions (external mechanism, exposed for tooling) --

    def afflict(self, entity_id: str, kind: str) -> None:
        entity = self.get(entity_id)
        if entity.has_status_effect(kind):
            return
        entity.add_status_effect(kind)
        self._publish(
            EventType.STATUS_EFFECT_ADDED,
            target_id=entity_id,
            details={"status_effect": as_tag(kind)},
        )

    def cure(self, entity_id: str, kind: str) -> None:
        """Remove a status effect by non-heal means (the only way out of stasis)."""
        if self.get(entity_id).remove_status_effect(kind):
            self._publish(
                EventType.STATUS_EFFECT_REMOVED,
                target_id=entity_id,
                details={"status_effect": as_tag(kind)},
            )

    # -- Healing --

    def select_heal_button(self, player_id: str, button: str) -> bool:
        return self.player(player_id).select_heal_button(button)

    def cancel_heal_button(self, player_id: str) -> None:
        self.player(player_id).cancel_heal_button()

    def attempt_heal(
        self,
        player_id: str,
        button: str | None = None,
        target: TargetSpec | None = None,
    ) -> HealOutcome:
        """Resolve one heal attempt. *button* defaults to the player's selected button."""
        player = self.player(player_id)
        target = target if target is not None else Untargeted()
        button = button if button is not None else player.active_heal_button
        if button is None:
            outcome = HealOutcome(
                player_id=player_id,
                button=None,
                target_mode=target.mode,
                status=OutcomeStatus.REJECTED,
                reason="no heal button selected",
            )
        else:
            outcome = self.resolver.resolve(player, button, target)
        # A locked gate leaves the primed button alone
        if not outcome.on_cooldown:
            player.cancel_heal_button()
        self._publish_outcome(outcome)
        return outcome

    def _publish_outcome(self, outcome: HealOutcome) -> None:
        actor = outcome.player_id
        for change in outcome.changes:
            if change.health_delta:
                self._publish(
                    EventType.HEALTH_CHANGED,
                    actor_id=actor,
                    target_id=change.entity_id,
                    details={"old": change.health_before, "new": change.health_after},
                )
            if change.overheal_delta:
                self._publish(
                    EventType.OVERHEAL_CHANGED,
                    actor_id=actor,
                    target_id=change.entity_id,
                    details={"old": change.overheal_before, "new": change.overheal_after},
                )
            for kind in change.removed_effects:
                self._publish(
                    EventType.STATUS_EFFECT_REMOVED,
                    actor_id=actor,
                    target_id=change.entity_id,
                    details={"status_effect": kind},
                )
        self._publish(
            _OUTCOME_EVENTS[outcome.status],
            actor_id=actor,
            description=outcome.reason,
            details={"button": outcome.button, "target_mode": outcome.target_mode.value},
        )
        if outcome.status in (OutcomeStatus.SUCCESS, OutcomeStatus.FAILED):
            self._publish(
                EventType.COOLDOWN_STARTED,
                actor_id=actor,
                details={"duration_ms": outcome.cooldown_ms},
            )

    def _on_decay(self, entity: Entity, old: int, new: int) -> None:
        self._publish(
            EventType.OVERHEAL_CHANGED,
            target_id=entity.id,
            details={"old": old, "new": new},
        )

    def shutdown(self) -> None:
        self.decay.cancel_all()
        for entity in self.entities.values():
            if isinstance(entity, Player):
                entity.cooldown.cancel()
