"""Scripted healers and a random affliction driver for simulated sessions.

The casual policy only ever presses Tricolor at nothing in particular; the
skilled policy aims color heals at icons and Red at the most injured member.
Running both against the same affliction stream shows how far apart the two
play styles end up.
"""
from __future__ import annotations

import logging
import random
from typing import Protocol

from pydantic import BaseModel

from smart_heal.engine.healing_engine import HealingEngine
from smart_heal.engine.scheduler import SimulatedScheduler, TimerHandle
from smart_heal.models.event import EventType, HealEvent
from smart_heal.models.heal import EntityTarget, StatusEffectTarget, TargetSpec, Untargeted
from smart_heal.models.player import Player

logger = logging.getLogger(__name__)

Choice = tuple[str, TargetSpec]


class HealPolicy(Protocol):
    name: str

    def choose(self, player: Player, engine: HealingEngine) -> Choice | None: ...


class CasualPolicy:
    name = "casual"

    def choose(self, player: Player, engine: HealingEngine) -> Choice | None:
        return engine.catalog.universal_button, Untargeted()


class SkilledPolicy:
    """Cure icons with matching colors, group-cure when many are afflicted, then top up health."""

    name = "skilled"

    def __init__(self, group_threshold: int = 3, injured_below: float = 0.9) -> None:
        self.group_threshold = group_threshold
        self.injured_below = injured_below

    def choose(self, player: Player, engine: HealingEngine) -> Choice | None:
        catalog = engine.catalog
        members = player.healable_party_members()
        if not members:
            return None

        afflicted = [m for m in members if m.all_status_effects()]
        if len(afflicted) >= self.group_threshold:
            return catalog.universal_button, Untargeted()

        for member in afflicted:
            for kind in sorted(member.all_status_effects()):
                button = catalog.heal_button_for(catalog.color_of(kind))
                if button is not None:
                    return button, StatusEffectTarget(member.id, kind)
            # Only uncurable colors left on this member
            return catalog.universal_button, StatusEffectTarget(member.id, sorted(member.all_status_effects())[0])

        injured = [m for m in members if m.health < m.max_health * self.injured_below]
        if len(injured) > 1:
            return catalog.health_button, Untargeted()
        if injured:
            return catalog.health_button, EntityTarget(injured[0].id)
        # Everyone is topped up: keep feeding overheal to the lowest one
        lowest = min(members, key=lambda m: m.overheal)
        return catalog.health_button, EntityTarget(lowest.id)


POLICIES: dict[str, type] = {
    CasualPolicy.name: CasualPolicy,
    SkilledPolicy.name: SkilledPolicy,
}


class Afflicter:
    """Every interval, a random party member gains a random registered status effect."""

    def __init__(
        self,
        engine: HealingEngine,
        party_ids: list[str],
        interval_ms: int = 500,
        rng: random.Random | None = None,
        kinds: list[str] | None = None,
    ) -> None:
        self.engine = engine
        self.party_ids = party_ids
        self.interval_ms = interval_ms
        self.rng = rng or random.Random()
        self.kinds = kinds if kinds is not None else engine.catalog.kinds
        self._handle: TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is None:
            self._schedule()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self.engine.scheduler.call_later(self.interval_ms, self._tick)

    def _tick(self) -> None:
        live = [entity_id for entity_id in self.party_ids if entity_id in self.engine.entities]
        if live and self.kinds:
            self.engine.afflict(self.rng.choice(live), self.rng.choice(self.kinds))
        self._schedule()


class SessionReport(BaseModel):
    policy: str
    duration_ms: int
    attempts: int = 0
    successes: int = 0
    failures: int = 0
    rejections: int = 0
    effects_cured: int = 0
    effects_inflicted: int = 0
    health_restored: int = 0
    overheal_generated: int = 0


def run_session(
    engine: HealingEngine,
    player_id: str,
    policy: HealPolicy,
    duration_ms: int,
    afflicter: Afflicter | None = None,
    step_ms: int = 50,
) -> SessionReport:
    """Drive *policy* on a simulated clock for *duration_ms*."""
    scheduler = engine.scheduler
    if not isinstance(scheduler, SimulatedScheduler):
        raise TypeError("run_session needs a SimulatedScheduler")

    report = SessionReport(policy=policy.name, duration_ms=duration_ms)

    def tally(event: HealEvent) -> None:
        if event.event_type == EventType.STATUS_EFFECT_ADDED:
            report.effects_inflicted += 1
        elif event.event_type == EventType.STATUS_EFFECT_REMOVED and event.actor_id == player_id:
            report.effects_cured += 1
        elif event.event_type == EventType.HEALTH_CHANGED:
            report.health_restored += event.details["new"] - event.details["old"]
        elif event.event_type == EventType.OVERHEAL_CHANGED and event.actor_id == player_id:
            report.overheal_generated += event.details["new"] - event.details["old"]

    engine.subscribe(tally)
    if afflicter is not None:
        afflicter.start()
    player = engine.player(player_id)
    try:
        elapsed = 0
        while elapsed < duration_ms:
            if player.cooldown.is_available:
                choice = policy.choose(player, engine)
                if choice is not None:
                    button, target = choice
                    outcome = engine.attempt_heal(player_id, button, target)
                    report.attempts += 1
                    if outcome.succeeded:
                        report.successes += 1
                    elif outcome.failed:
                        report.failures += 1
                    elif outcome.rejected:
                        report.rejections += 1
            scheduler.advance(step_ms)
            elapsed += step_ms
    finally:
        engine.unsubscribe(tally)
        if afflicter is not None:
            afflicter.stop()
    logger.info("%s session: %d attempts, %d cured", policy.name, report.attempts, report.effects_cured)
    return report
