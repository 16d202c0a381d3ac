"""Loads config.toml and wires the healing engine together."""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any

from smart_heal.engine.healing_engine import HealingEngine
from smart_heal.engine.scheduler import Scheduler, SimulatedScheduler
from smart_heal.mechanics.catalog import StatusEffectCatalog
from smart_heal.mechanics.throughput import SplitViolation, find_split_violations
from smart_heal.mechanics.tuning import HealTuning, load_tuning
from smart_heal.models.player import Player

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"


def _load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config.toml (project root by default). Missing file means all defaults."""
    import tomllib

    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    logger.info("No config at %s, using defaults", config_path)
    return {}


class HealingApp:
    """Builds the catalog, tuning and engine from configuration."""

    def __init__(
        self,
        config_path: Path | None = None,
        config: dict[str, Any] | None = None,
        scheduler: Scheduler | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config if config is not None else _load_config(config_path)
        self.seed = seed if seed is not None else self.config.get("demo", {}).get("seed")
        self.rng = random.Random(self.seed)

        # Lazy-initialized components
        self._scheduler = scheduler
        self._catalog: StatusEffectCatalog | None = None
        self._tuning: HealTuning | None = None
        self._engine: HealingEngine | None = None

    # -- Component initialization (lazy) --

    @property
    def scheduler(self) -> Scheduler:
        if self._scheduler is None:
            self._scheduler = SimulatedScheduler()
        return self._scheduler

    @property
    def catalog(self) -> StatusEffectCatalog:
        if self._catalog is None:
            catalog = StatusEffectCatalog.from_config(self.config.get("catalog", {}))
            catalog.validate()
            self._catalog = catalog
        return self._catalog

    @property
    def tuning(self) -> HealTuning:
        if self._tuning is None:
            self._tuning = load_tuning(self.config.get("tuning", {}))
        return self._tuning

    @property
    def engine(self) -> HealingEngine:
        if self._engine is None:
            self._engine = HealingEngine(self.catalog, self.tuning, self.scheduler, rng=self.rng)
        return self._engine

    # -- Startup checks --

    def check_throughput(self) -> list[SplitViolation]:
        """Warn about party splits the group-heal tuning would reward."""
        max_size = self.config.get("throughput", {}).get("max_party_size", 8)
        t = self.tuning
        violations = find_split_violations(
            max_size,
            t.red_party_percent,
            t.heal_percent_reduction_per_target,
            t.red_party_cooldown_ms,
        )
        for v in violations:
            logger.warning(
                "Splitting a party of %d into %d + %d heals more (%.1f%% vs %.1f%%)",
                v.first + v.second, v.first, v.second, v.split, v.merged,
            )
        return violations

    # -- Roster --

    def load_roster(self) -> list[str]:
        """Create the ``[[roster]]`` entities and put them all in one party. Returns their ids."""
        engine = self.engine
        ids: list[str] = []
        for entry in self.config.get("roster", []):
            kwargs = dict(
                name=entry["name"],
                health=int(entry["health"]),
                max_health=int(entry["max_health"]),
                team=str(entry.get("team", "")),
                id=entry.get("id"),
            )
            if entry.get("player"):
                entity = engine.add_player(**kwargs)
            else:
                entity = engine.add_entity(**kwargs)
            ids.append(entity.id)
        if ids:
            engine.form_party(ids)
        return ids

    def first_player_id(self) -> str | None:
        for entity in self.engine.entities.values():
            if isinstance(entity, Player):
                return entity.id
        return None

    def shutdown(self) -> None:
        if self._engine is not None:
            self._engine.shutdown()
