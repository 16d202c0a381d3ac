"""Rich terminal display for party frames, heal outcomes and reports."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from smart_heal.engine.autopilot import SessionReport
from smart_heal.mechanics.catalog import StatusEffectCatalog
from smart_heal.mechanics.throughput import SplitViolation
from smart_heal.models.entity import EntitySnapshot
from smart_heal.models.heal import HealOutcome, OutcomeStatus

console = Console()

# Rich style per status effect color / heal button
COLOR_STYLES = {
    "black": "bold white on grey23",
    "blue": "bold blue",
    "green": "bold green",
    "red": "bold red",
    "tricolor": "bold magenta",
}

_OUTCOME_STYLES = {
    OutcomeStatus.SUCCESS: "green",
    OutcomeStatus.FAILED: "yellow",
    OutcomeStatus.REJECTED: "red",
    OutcomeStatus.ON_COOLDOWN: "dim",
}


class Display:
    def __init__(self, catalog: StatusEffectCatalog, output: Console | None = None) -> None:
        self.catalog = catalog
        self.console = output or console

    def show_title(self) -> None:
        title = Text()
        title.append("Smart Heal", style="bold magenta")
        title.append("\nPress a heal button, then click what you want to heal.", style="dim")
        title.append("\nType help for commands.", style="dim")
        self.console.print(Panel(title, border_style="magenta", box=box.ROUNDED))

    def show_party(self, snapshots: list[EntitySnapshot], now_ms: float | None = None) -> None:
        table = Table(box=box.SIMPLE_HEAVY, title=f"t = {now_ms:.0f} ms" if now_ms is not None else None)
        table.add_column("Name", style="bold")
        table.add_column("Health", justify="right")
        table.add_column("Max Health", justify="right")
        table.add_column("Overheal", justify="right", style="cyan")
        table.add_column("Team")
        table.add_column("Status Effects")
        table.add_column("Cooldown", justify="right")

        for snap in snapshots:
            pct = snap.health / max(snap.max_health, 1)
            hp_style = "green" if pct > 0.5 else ("yellow" if pct > 0.25 else "red")
            effects = Text()
            for kind in snap.status_effects:
                if effects:
                    effects.append(" ")
                effects.append(kind.title(), style=COLOR_STYLES.get(self.catalog.color_of(kind), ""))
            cooldown = ""
            if snap.is_player:
                cooldown = f"{snap.cooldown_remaining_ms:.0f} ms" if snap.cooldown_remaining_ms else "ready"
                if snap.active_heal_button:
                    cooldown += f" ({snap.active_heal_button})"
            table.add_row(
                snap.name,
                Text(str(snap.health), style=hp_style),
                str(snap.max_health),
                str(snap.overheal),
                snap.team,
                effects,
                cooldown,
            )
        self.console.print(table)

    def show_outcome(self, outcome: HealOutcome, names: dict[str, str]) -> None:
        style = _OUTCOME_STYLES[outcome.status]
        line = Text()
        button = outcome.button or "no button"
        line.append(f"{button.title()} heal ", style=COLOR_STYLES.get(button, "bold"))
        line.append(f"({outcome.target_mode.value}): ", style="dim")
        line.append(outcome.status.value.replace("_", " "), style=style)
        if outcome.cooldown_ms is not None:
            line.append(f", cooldown {outcome.cooldown_ms} ms", style="dim")
        if outcome.reason:
            line.append(f": {outcome.reason}", style="dim")
        self.console.print(line)
        for change in outcome.changes:
            name = names.get(change.entity_id, change.entity_id)
            parts = []
            if change.health_delta:
                parts.append(f"+{change.health_delta} health")
            if change.overheal_delta:
                parts.append(f"+{change.overheal_delta} overheal")
            for kind in change.removed_effects:
                parts.append(f"cured {kind}")
            self.console.print(f"  {name}: {', '.join(parts)}")

    def show_messages(self, messages: list[str]) -> None:
        for message in messages:
            self.console.print(escape(message))

    def show_report(self, reports: list[SessionReport]) -> None:
        table = Table(title="Simulated healing sessions", box=box.ROUNDED)
        table.add_column("Policy", style="bold", no_wrap=True)
        for label in ("Attempts", "Successes", "Failures", "Cured", "Inflicted", "Health", "Overheal"):
            table.add_column(label, justify="right")
        for r in reports:
            table.add_row(
                r.policy,
                str(r.attempts),
                str(r.successes),
                str(r.failures),
                str(r.effects_cured),
                str(r.effects_inflicted),
                str(r.health_restored),
                str(r.overheal_generated),
            )
        self.console.print(table)

    def show_validation(self, errors: list[str], violations: list[SplitViolation]) -> None:
        if errors:
            for error in errors:
                self.console.print(f"[red]✗[/red] {escape(error)}")
        else:
            self.console.print("[green]✓[/green] Catalog and tuning are valid")
        if violations:
            for v in violations:
                self.console.print(
                    f"[yellow]![/yellow] Splitting {v.first + v.second} into {v.first} + {v.second} "
                    f"heals more ({v.split:.1f}% vs {v.merged:.1f}%)"
                )
        elif not errors:
            self.console.print("[green]✓[/green] Group heals never reward splitting the party")
