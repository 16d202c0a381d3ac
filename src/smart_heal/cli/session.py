"""Interactive console session: the default, editing and healing mode machine.

Press a heal button (``select green``), then click something (``click alice
burning``, ``click alice`` or just ``click``). ``heal <button> ...`` does both
at once. Edit mode allows changing health, max health, team and toggling
status effects.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from smart_heal.cli.input_handler import InputHandler, UIMode
from smart_heal.engine.autopilot import Afflicter
from smart_heal.engine.healing_engine import HealingEngine
from smart_heal.engine.scheduler import SimulatedScheduler
from smart_heal.mechanics.catalog import CatalogError
from smart_heal.models.entity import Entity, InvalidBounds
from smart_heal.models.heal import EntityTarget, HealOutcome, StatusEffectTarget, TargetSpec, Untargeted

HELP_TEXT = """\
select <button>              prime a heal button (tricolor, red, green, blue)
click [<entity> [<effect>]]  heal a status effect icon, an entity, or nobody in particular
heal <button> [<entity> [<effect>]]   select and click in one go
cancel                       drop the selected heal button
edit                         toggle edit mode
set <entity> health|max|team <value>  (edit mode)
toggle <entity> <effect>     add or remove a status effect (edit mode)
random                       toggle random status effects every 500 ms
wait [ms]                    advance the simulated clock (default 100 ms)
party                        show the party frames
quit"""


@dataclass
class SessionReply:
    messages: list[str] = field(default_factory=list)
    outcome: HealOutcome | None = None
    show_party: bool = False
    quit: bool = False


class PlaySession:
    def __init__(self, engine: HealingEngine, player_id: str, afflicter: Afflicter | None = None) -> None:
        self.engine = engine
        self.player_id = player_id
        self.afflicter = afflicter
        self.mode = UIMode.DEFAULT
        self.handler = InputHandler()

    def handle(self, raw_input: str) -> SessionReply:
        parsed = self.handler.classify(raw_input)
        command = parsed["command"]
        args = parsed["args"]
        if command is None:
            return SessionReply()
        handler = getattr(self, f"_cmd_{command}", None)
        if handler is None:
            return SessionReply([f"Unknown command '{raw_input.strip()}'. Type help for a list."])
        try:
            return handler(**args)
        except (InvalidBounds, CatalogError) as e:
            return SessionReply([str(e)])

    # -- Commands --

    def _cmd_help(self) -> SessionReply:
        return SessionReply([HELP_TEXT])

    def _cmd_quit(self) -> SessionReply:
        return SessionReply(["Goodbye."], quit=True)

    def _cmd_party(self) -> SessionReply:
        return SessionReply(show_party=True)

    def _cmd_edit(self) -> SessionReply:
        if self.mode == UIMode.HEALING:
            return SessionReply(["Finish or cancel the heal first."])
        self.mode = UIMode.DEFAULT if self.mode == UIMode.EDITING else UIMode.EDITING
        state = "enabled" if self.mode == UIMode.EDITING else "disabled"
        return SessionReply([f"Edit mode {state}."])

    def _cmd_random(self) -> SessionReply:
        if self.afflicter is None:
            return SessionReply(["Random status effects are not available."])
        if self.afflicter.running:
            self.afflicter.stop()
            return SessionReply(["Random status effects disabled."])
        self.afflicter.start()
        return SessionReply(["Random status effects enabled."])

    def _cmd_wait(self, ms: int) -> SessionReply:
        scheduler = self.engine.scheduler
        if not isinstance(scheduler, SimulatedScheduler):
            return SessionReply(["The clock runs on its own in real-time mode."])
        scheduler.advance(ms)
        return SessionReply([f"{ms} ms pass."], show_party=True)

    def _cmd_cancel(self) -> SessionReply:
        if self.mode != UIMode.HEALING:
            return SessionReply(["No heal button selected."])
        self.engine.cancel_heal_button(self.player_id)
        self.mode = UIMode.DEFAULT
        return SessionReply(["Heal cancelled."])

    def _cmd_select(self, button: str) -> SessionReply:
        if self.mode != UIMode.DEFAULT:
            return SessionReply([f"Can't select a heal button in {self.mode.value} mode."])
        if not self.engine.catalog.is_registered_button(button):
            return SessionReply([f"There is no {button} heal button."])
        if not self.engine.select_heal_button(self.player_id, button):
            remaining = self.engine.player(self.player_id).cooldown.remaining_ms
            return SessionReply([f"Healing is on cooldown ({remaining:.0f} ms left)."])
        self.mode = UIMode.HEALING
        return SessionReply([f"{button.title()} heal ready. Click something."])

    def _cmd_click(self, entity: str | None, effect: str | None) -> SessionReply:
        if self.mode != UIMode.HEALING:
            return SessionReply(["Select a heal button first."])
        target = self._target(entity, effect)
        if target is None:
            return SessionReply([f"No one called '{entity}' here."])
        outcome = self.engine.attempt_heal(self.player_id, target=target)
        self.mode = UIMode.HEALING if outcome.on_cooldown else UIMode.DEFAULT
        return SessionReply(outcome=outcome, show_party=True)

    def _cmd_heal(self, button: str, entity: str | None, effect: str | None) -> SessionReply:
        if self.mode != UIMode.DEFAULT:
            return self._cmd_select(button)
        reply = self._cmd_select(button)
        if self.mode != UIMode.HEALING:
            return reply
        return self._cmd_click(entity, effect)

    def _cmd_set(self, entity: str, field: str, value: str) -> SessionReply:
        if self.mode != UIMode.EDITING:
            return SessionReply(["Enable edit mode first."])
        target = self._find(entity)
        if target is None:
            return SessionReply([f"No one called '{entity}' here."])
        if field == "team":
            target.team = value
        else:
            try:
                number = int(value)
            except ValueError:
                return SessionReply([f"'{value}' is not a number."])
            if field == "health":
                target.set_health(number)
            else:
                target.set_max_health(number)
        return SessionReply([f"{target.name}: {field} set to {value}."], show_party=True)

    def _cmd_toggle(self, entity: str, effect: str) -> SessionReply:
        if self.mode != UIMode.EDITING:
            return SessionReply(["Enable edit mode first."])
        target = self._find(entity)
        if target is None:
            return SessionReply([f"No one called '{entity}' here."])
        if target.has_status_effect(effect):
            self.engine.cure(target.id, effect)
        else:
            self.engine.afflict(target.id, effect)
        return SessionReply(show_party=True)

    def _cmd_unrecognized(self) -> SessionReply:
        return SessionReply(["Unknown command. Type help for a list."])

    # -- Helpers --

    def _find(self, ref: str) -> Entity | None:
        ref = ref.lower()
        for entity in self.engine.entities.values():
            name = entity.name.lower()
            if entity.id.lower() == ref or name == ref or name.split()[:1] == [ref]:
                return entity
        return None

    def _target(self, entity_ref: str | None, effect: str | None) -> TargetSpec | None:
        if entity_ref is None:
            return Untargeted()
        entity = self._find(entity_ref)
        if entity is None:
            return None
        player = self.engine.player(self.player_id)
        # Red can't cure icons and inactive icons aren't clickable, so the click lands on the unit frame
        if (
            effect is None
            or self.engine.catalog.is_health_button(player.active_heal_button or "")
            or not entity.has_status_effect(effect)
        ):
            return EntityTarget(entity.id)
        return StatusEffectTarget(entity.id, effect)
