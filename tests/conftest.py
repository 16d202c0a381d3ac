"""Shared fixtures for the smart-heal test suite."""
from __future__ import annotations

import random

import pytest

from smart_heal.engine.healing_engine import HealingEngine
from smart_heal.engine.scheduler import SimulatedScheduler
from smart_heal.mechanics.catalog import StatusEffectCatalog
from smart_heal.mechanics.tuning import HealTuning


@pytest.fixture
def catalog() -> StatusEffectCatalog:
    return StatusEffectCatalog()


@pytest.fixture
def tuning() -> HealTuning:
    return HealTuning()


@pytest.fixture
def scheduler() -> SimulatedScheduler:
    return SimulatedScheduler()


@pytest.fixture
def engine(catalog, tuning, scheduler) -> HealingEngine:
    eng = HealingEngine(catalog, tuning, scheduler, rng=random.Random(42))
    yield eng
    eng.shutdown()


@pytest.fixture
def party(engine):
    """A healer with two teammates and a player from another team, all in one party.

    healer: 800/1000  tank: 500/1000  mage: 1000/1000  rival (team Bar): 500/1000
    """
    members = {
        "healer": engine.add_player("Healer", 800, 1000, "Foo", id="healer"),
        "tank": engine.add_entity("Tank", 500, 1000, "Foo", id="tank"),
        "mage": engine.add_entity("Mage", 1000, 1000, "Foo", id="mage"),
        "rival": engine.add_entity("Rival", 500, 1000, "Bar", id="rival"),
    }
    engine.form_party(["healer", "tank", "mage", "rival"])
    return members


@pytest.fixture
def events(engine, party):
    """Every HealEvent the engine publishes once the party is assembled."""
    received = []
    engine.subscribe(received.append)
    return received


