"""Tests for src/smart_heal/models/entity.py."""
from __future__ import annotations

import pytest

from smart_heal.mechanics.catalog import StatusEffect, UnregisteredEffect
from smart_heal.models.entity import Entity, InvalidBounds, form_party


def make(health=500, max_health=1000, team="Foo", name="Ally", id=None) -> Entity:
    return Entity(name, health, max_health, team, id=id)


class TestBounds:
    @pytest.mark.parametrize("health, max_health", [(-1, 100), (101, 100), (0, -1)])
    def test_constructor_rejects(self, health, max_health):
        with pytest.raises(InvalidBounds):
            Entity("Bad", health, max_health, "Foo")

    def test_set_health(self):
        e = make()
        e.set_health(1000)
        assert e.health == 1000
        with pytest.raises(InvalidBounds):
            e.set_health(1001)
        with pytest.raises(InvalidBounds):
            e.set_health(-1)

    def test_set_max_health_below_health(self):
        e = make(health=500)
        with pytest.raises(InvalidBounds):
            e.set_max_health(499)
        e.set_max_health(500)
        assert e.max_health == 500

    def test_negative_overheal_gain(self):
        with pytest.raises(InvalidBounds):
            make().add_overheal(-1)

    def test_generated_id(self):
        assert make().id != make().id


class TestHealHealth:
    def test_within_max(self):
        e = make(health=500)
        assert e.heal_health(30) == 0
        assert e.health == 800
        assert e.overheal == 0

    def test_excess_becomes_overheal(self):
        e = make(health=95, max_health=100)
        assert e.heal_health(10) == 5
        assert e.health == 100
        assert e.overheal == 5

    def test_zero_percent_is_noop(self):
        e = make(health=500)
        e.heal_health(0)
        assert (e.health, e.overheal) == (500, 0)

    def test_overheal_accumulates(self):
        e = make(health=1000)
        e.heal_health(10)
        e.heal_health(10)
        assert e.overheal == 200


class TestHealHealthGroup:
    @pytest.mark.parametrize("size, expected_health", [
        (1, 300),  # 30%
        (2, 285),  # 28.5%
        (3, 270),  # 27.075%
    ])
    def test_diminishing_per_member(self, size, expected_health):
        members = [make(health=0, id=f"m{i}") for i in range(size)]
        percent = Entity.heal_health_group(members, 30, 5)
        assert percent > 0
        assert all(m.health == expected_health for m in members)


class TestOverheal:
    def test_listener_notified(self):
        e = make(health=1000)
        seen = []
        e.add_overheal_listener(lambda entity, old, new: seen.append((old, new)))
        e.heal_health(10)
        assert seen == [(0, 100)]

    def test_decay_returns_old_and_new(self):
        e = make(health=1000)
        e.add_overheal(100)
        assert e.decay_overheal(lambda v: v // 2) == (100, 50)
        assert e.overheal == 50

    def test_remove_listener(self):
        e = make()
        seen = []
        def listener(entity, old, new):
            seen.append(new)

        e.add_overheal_listener(listener)
        e.remove_overheal_listener(listener)
        e.add_overheal(5)
        assert seen == []


class TestStatusEffects:
    def test_add_and_query(self):
        e = make()
        e.add_status_effect("burning")
        e.add_status_effect(StatusEffect.ASLEEP)
        assert e.has_status_effect("burning")
        assert e.all_status_effects() == {"burning", "asleep"}
        assert e.status_effects_of_color("green") == {"burning"}
        assert e.status_effects_of_color("blue") == {"asleep"}

    def test_add_is_idempotent(self):
        e = make()
        e.add_status_effect("burning")
        e.add_status_effect("burning")
        assert e.all_status_effects() == {"burning"}

    def test_remove(self):
        e = make()
        e.add_status_effect("burning")
        assert e.remove_status_effect("burning") is True
        assert e.remove_status_effect("burning") is False
        assert e.all_status_effects() == set()

    def test_unregistered_kind(self):
        with pytest.raises(UnregisteredEffect):
            make().add_status_effect("petrified")


class TestHealability:
    def test_same_team(self):
        assert make(team="Foo").is_healable_by(make(team="Foo"))

    def test_other_team(self):
        assert not make(team="Bar").is_healable_by(make(team="Foo"))

    def test_stasis_blocks_everyone_including_self(self):
        e = make()
        e.add_status_effect("stasis")
        assert not e.is_healable_by(e)
        assert not e.is_healable_by(make())

    def test_healable_party_members(self):
        healer = make(id="healer")
        ally = make(id="ally")
        enemy = make(id="enemy", team="Bar")
        frozen_ally = make(id="stuck")
        frozen_ally.add_status_effect("stasis")
        form_party([healer, ally, enemy, frozen_ally])
        assert [m.id for m in healer.healable_party_members()] == ["healer", "ally"]


class TestPartyAndSnapshot:
    def test_form_party_shares_list(self):
        a, b = make(id="a"), make(id="b")
        form_party([a, b])
        assert a.party is b.party
        assert [m.id for m in a.party] == ["a", "b"]

    def test_default_party_is_self(self):
        e = make()
        assert e.party == [e]

    def test_snapshot(self):
        e = make(health=1000, id="x", name="Xena")
        e.add_status_effect("poisoned")
        e.add_status_effect("asleep")
        e.heal_health(5)
        snap = e.snapshot()
        assert snap.id == "x"
        assert snap.name == "Xena"
        assert snap.overheal == 50
        assert snap.status_effects == ["asleep", "poisoned"]
        assert snap.party_ids == ["x"]
        assert snap.is_player is False
