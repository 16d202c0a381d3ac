"""Tests for src/smart_heal/engine/autopilot.py."""
from __future__ import annotations

import random

import pytest

from smart_heal.engine.autopilot import (
    POLICIES,
    Afflicter,
    CasualPolicy,
    SkilledPolicy,
    run_session,
)
from smart_heal.engine.healing_engine import HealingEngine
from smart_heal.engine.scheduler import ThreadScheduler
from smart_heal.models.heal import EntityTarget, StatusEffectTarget, Untargeted

CURABLE = ["asleep", "burning", "poisoned", "frozen"]


class TestCasualPolicy:
    def test_always_tricolor_untargeted(self, engine, party):
        assert CasualPolicy().choose(party["healer"], engine) == ("tricolor", Untargeted())


class TestSkilledPolicy:
    def test_group_cure_when_many_afflicted(self, engine, party):
        for member in ("healer", "tank", "mage"):
            party[member].add_status_effect("burning")
        assert SkilledPolicy().choose(party["healer"], engine) == ("tricolor", Untargeted())

    def test_matching_color_on_icon(self, engine, party):
        party["tank"].add_status_effect("frozen")
        button, target = SkilledPolicy().choose(party["healer"], engine)
        assert button == "blue"
        assert target == StatusEffectTarget("tank", "frozen")

    def test_group_heal_when_several_injured(self, engine, party):
        # healer 800 and tank 500 are both under 90%
        assert SkilledPolicy().choose(party["healer"], engine) == ("red", Untargeted())

    def test_single_injured_member(self, engine, party):
        party["healer"].set_health(1000)
        assert SkilledPolicy().choose(party["healer"], engine) == ("red", EntityTarget("tank"))

    def test_everyone_full_feeds_lowest_overheal(self, engine, party):
        party["healer"].set_health(1000)
        party["tank"].set_health(1000)
        party["healer"].add_overheal(50)
        party["mage"].add_overheal(80)
        assert SkilledPolicy().choose(party["healer"], engine) == ("red", EntityTarget("tank"))

    def test_nobody_healable(self, engine):
        solo = engine.add_player("Solo", 500, 1000, "Foo", id="solo")
        solo.add_status_effect("stasis")
        assert SkilledPolicy().choose(solo, engine) is None

    def test_registry(self):
        assert set(POLICIES) == {"casual", "skilled"}


class TestAfflicter:
    def test_afflicts_every_interval(self, engine, party, scheduler):
        afflicter = Afflicter(engine, list(party), interval_ms=500, rng=random.Random(3), kinds=CURABLE)
        afflicter.start()
        assert afflicter.running
        scheduler.advance(499)
        assert all(not m.all_status_effects() for m in party.values())
        scheduler.advance(1)
        assert sum(len(m.all_status_effects()) for m in party.values()) == 1

    def test_stop(self, engine, party, scheduler):
        afflicter = Afflicter(engine, list(party), rng=random.Random(3))
        afflicter.start()
        afflicter.stop()
        assert not afflicter.running
        scheduler.advance(5000)
        assert all(not m.all_status_effects() for m in party.values())

    def test_skips_removed_members(self, engine, party, scheduler):
        afflicter = Afflicter(engine, ["tank"], interval_ms=100, rng=random.Random(3), kinds=CURABLE)
        engine.remove_entity("tank")
        afflicter.start()
        scheduler.advance(300)
        assert party["tank"].all_status_effects() == set()
        afflicter.stop()


class TestRunSession:
    def test_casual_session(self, engine, party):
        afflicter = Afflicter(engine, list(party), rng=random.Random(5), kinds=CURABLE)
        report = run_session(engine, "healer", CasualPolicy(), 5000, afflicter=afflicter)
        # Tricolor party heals at t = 0, 1500, 3000 and 4500
        assert report.policy == "casual"
        assert report.attempts == 4
        assert report.successes == 4
        assert 0 < report.effects_inflicted <= 10
        assert not afflicter.running

    def test_skilled_session_counts_outcomes(self, engine, party):
        afflicter = Afflicter(engine, list(party), rng=random.Random(5), kinds=CURABLE)
        report = run_session(engine, "healer", SkilledPolicy(), 5000, afflicter=afflicter)
        assert report.attempts > 0
        assert report.attempts == report.successes + report.failures + report.rejections
        assert report.health_restored > 0

    def test_requires_simulated_clock(self, catalog, tuning):
        scheduler = ThreadScheduler()
        engine = HealingEngine(catalog, tuning, scheduler)
        engine.add_player("Solo", 500, 1000, "Foo", id="solo")
        with pytest.raises(TypeError):
            run_session(engine, "solo", CasualPolicy(), 1000)
        scheduler.shutdown()
