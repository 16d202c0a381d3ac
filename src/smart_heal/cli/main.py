"""Typer CLI application."""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="smart-heal",
    help="Shared-cooldown smart healing: tricolor, red and color-matched heals",
    no_args_is_help=True,
)


def _configure_logging(level_name: str, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_app(config: Optional[Path], seed: Optional[int], verbose: bool):
    from smart_heal.app import HealingApp

    healing_app = HealingApp(config_path=config, seed=seed)
    _configure_logging(healing_app.config.get("logging", {}).get("level", "WARNING"), verbose)
    return healing_app


@app.command()
def validate(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Check the status effect catalog, tuning values and party throughput."""
    from pydantic import ValidationError

    from smart_heal.cli.display import Display
    from smart_heal.mechanics.catalog import CatalogError, StatusEffectCatalog

    healing_app = _build_app(config, None, verbose)
    errors: list[str] = []
    violations = []
    catalog = None
    try:
        catalog = healing_app.catalog
    except CatalogError as e:
        errors.append(f"catalog: {e}")
    try:
        violations = healing_app.check_throughput()
    except ValidationError as e:
        errors.append(f"tuning: {e}")

    Display(catalog or StatusEffectCatalog()).show_validation(errors, violations)
    if errors:
        raise typer.Exit(code=1)


@app.command()
def demo(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    policy: Optional[str] = typer.Option(None, "--policy", "-p", help="casual or skilled (default: both)"),
    duration: Optional[int] = typer.Option(None, "--duration", "-d", help="Simulated milliseconds"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run scripted healers against random status effects on a simulated clock."""
    from smart_heal.app import HealingApp
    from smart_heal.cli.display import Display
    from smart_heal.engine.autopilot import POLICIES, Afflicter, run_session

    base = _build_app(config, seed, verbose)
    demo_cfg = base.config.get("demo", {})
    duration_ms = duration or demo_cfg.get("duration_ms", 20000)
    names = [policy] if policy else list(POLICIES)
    unknown = [name for name in names if name not in POLICIES]
    if unknown:
        typer.echo(f"Unknown policy: {', '.join(unknown)}", err=True)
        raise typer.Exit(code=2)

    reports = []
    display = None
    for name in names:
        # Same seed per policy so both face the same affliction stream
        healing_app = HealingApp(config=base.config, seed=base.seed)
        display = display or Display(healing_app.catalog)
        party_ids = healing_app.load_roster()
        player_id = healing_app.first_player_id()
        if player_id is None:
            typer.echo("The roster has no player to heal with.", err=True)
            raise typer.Exit(code=1)
        afflicter = Afflicter(
            healing_app.engine,
            party_ids,
            interval_ms=demo_cfg.get("affliction_interval_ms", 500),
            rng=random.Random(base.seed),
        )
        reports.append(run_session(
            healing_app.engine, player_id, POLICIES[name](), duration_ms, afflicter=afflicter
        ))
        display.show_party(healing_app.engine.snapshot(), healing_app.scheduler.now())
        healing_app.shutdown()
    display.show_report(reports)


@app.command()
def play(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Heal the demo party interactively on a simulated clock."""
    from smart_heal.cli.display import Display
    from smart_heal.cli.session import PlaySession
    from smart_heal.engine.autopilot import Afflicter

    healing_app = _build_app(config, seed, verbose)
    healing_app.check_throughput()
    party_ids = healing_app.load_roster()
    player_id = healing_app.first_player_id()
    if player_id is None:
        typer.echo("The roster has no player to heal with.", err=True)
        raise typer.Exit(code=1)

    engine = healing_app.engine
    display = Display(healing_app.catalog)
    afflicter = Afflicter(
        engine,
        party_ids,
        interval_ms=healing_app.config.get("demo", {}).get("affliction_interval_ms", 500),
        rng=healing_app.rng,
    )
    session = PlaySession(engine, player_id, afflicter=afflicter)
    display.show_title()
    display.show_party(engine.snapshot(), engine.scheduler.now())
    try:
        while True:
            try:
                raw = display.console.input(f"[bold magenta]{session.mode.value}> [/bold magenta]")
            except (EOFError, KeyboardInterrupt):
                break
            reply = session.handle(raw)
            display.show_messages(reply.messages)
            if reply.outcome is not None:
                names = {entity_id: entity.name for entity_id, entity in engine.entities.items()}
                display.show_outcome(reply.outcome, names)
            if reply.show_party:
                display.show_party(engine.snapshot(), engine.scheduler.now())
            if reply.quit:
                break
    finally:
        healing_app.shutdown()


if __name__ == "__main__":
    app()
