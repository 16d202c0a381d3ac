from __future__ import annotations

from smart_heal.engine.cooldown import CooldownGate
from smart_heal.engine.scheduler import Scheduler
from smart_heal.mechanics.catalog import StatusEffectCatalog, UnregisteredColor, as_tag
from smart_heal.models.entity import Entity, EntitySnapshot


class Player(Entity):
    """An entity with heal buttons and a shared cooldown gate."""

    def __init__(
        self,
        name: str,
        health: int,
        max_health: int,
        team: str,
        scheduler: Scheduler,
        catalog: StatusEffectCatalog | None = None,
        id: str | None = None,
    ) -> None:
        super().__init__(name, health, max_health, team, catalog=catalog, id=id)
        self.cooldown = CooldownGate(scheduler)
        self.active_heal_button: str | None = None

    def select_heal_button(self, button: str) -> bool:
        """Prime *button* for the next heal attempt. Refused while on cooldown."""
        tag = as_tag(button)
        if not self.catalog.is_registered_button(tag):
            raise UnregisteredColor(tag)
        if not self.cooldown.is_available:
            return False
        self.active_heal_button = tag
        return True

    def cancel_heal_button(self) -> None:
        self.active_heal_button = None

    def snapshot(self) -> EntitySnapshot:
        base = super().snapshot()
        return base.model_copy(update={
            "is_player": True,
            "active_heal_button": self.active_heal_button,
            "cooldown_remaining_ms": self.cooldown.remaining_ms,
        })
