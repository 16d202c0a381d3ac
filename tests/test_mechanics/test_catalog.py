"""Tests for src/smart_heal/mechanics/catalog.py."""
from __future__ import annotations

import pytest

from smart_heal.mechanics.catalog import (
    HealButton,
    IncompleteCatalog,
    StatusEffect,
    StatusEffectCatalog,
    StatusEffectColor,
    UnregisteredColor,
    UnregisteredEffect,
    as_tag,
)


class TestAsTag:
    @pytest.mark.parametrize("value, expected", [
        (StatusEffect.BURNING, "burning"),
        (HealButton.TRICOLOR, "tricolor"),
        ("Frozen", "frozen"),
        ("green", "green"),
    ])
    def test_normalizes(self, value, expected):
        assert as_tag(value) == expected


class TestLookups:
    @pytest.mark.parametrize("kind, color", [
        ("stasis", "black"), ("asleep", "blue"), ("burning", "green"),
        ("poisoned", "green"), ("frozen", "blue"),
    ])
    def test_color_of(self, catalog, kind, color):
        assert catalog.color_of(kind) == color

    def test_color_of_accepts_enum(self, catalog):
        assert catalog.color_of(StatusEffect.ASLEEP) == StatusEffectColor.BLUE

    def test_color_of_unregistered_raises(self, catalog):
        with pytest.raises(UnregisteredEffect) as exc:
            catalog.color_of("petrified")
        assert exc.value.kind == "petrified"

    @pytest.mark.parametrize("color, button", [
        ("green", "green"), ("blue", "blue"), ("black", None),
    ])
    def test_heal_button_for(self, catalog, color, button):
        assert catalog.heal_button_for(color) == button

    def test_cures_color(self, catalog):
        assert catalog.cures_color("green") == "green"
        assert catalog.cures_color(HealButton.BLUE) == "blue"

    @pytest.mark.parametrize("button", ["tricolor", "red", "purple"])
    def test_cures_color_rejects_non_color_buttons(self, catalog, button):
        with pytest.raises(UnregisteredColor):
            catalog.cures_color(button)

    def test_buttons_universal_first(self, catalog):
        assert catalog.buttons == ["tricolor", "red", "green", "blue"]

    def test_button_roles(self, catalog):
        assert catalog.is_universal("tricolor")
        assert catalog.is_health_button("red")
        assert not catalog.is_universal("green")
        assert catalog.is_registered_button("blue")
        assert not catalog.is_registered_button("purple")

    def test_unhealable(self, catalog):
        assert catalog.is_unhealable("stasis")
        assert not catalog.is_unhealable("burning")
        assert catalog.unhealable_kinds == frozenset({"stasis"})

    def test_kinds_and_colors(self, catalog):
        assert set(catalog.kinds) == {"stasis", "asleep", "burning", "poisoned", "frozen"}
        assert catalog.colors == {"black", "blue", "green"}


class TestValidate:
    def test_default_catalog_is_complete(self, catalog):
        catalog.validate()

    def test_color_without_button(self):
        catalog = StatusEffectCatalog(
            status_effects={"burning": "green", "chilled": "white"},
            uncurable_colors=[],
        )
        with pytest.raises(IncompleteCatalog, match="white"):
            catalog.validate()

    def test_uncurable_color_is_allowed(self):
        catalog = StatusEffectCatalog(
            status_effects={"burning": "green", "asleep": "blue", "chilled": "white"},
            uncurable_colors=["white"],
            unhealable=[],
        )
        catalog.validate()

    def test_button_for_unused_color(self):
        catalog = StatusEffectCatalog(button_cures={"green": "green", "blue": "blue", "gold": "gold"})
        with pytest.raises(IncompleteCatalog, match="gold"):
            catalog.validate()

    def test_unregistered_unhealable(self):
        catalog = StatusEffectCatalog(unhealable=["stasis", "petrified"])
        with pytest.raises(IncompleteCatalog, match="petrified"):
            catalog.validate()

    def test_special_buttons_must_differ(self):
        catalog = StatusEffectCatalog(universal_button="red", health_button="red")
        with pytest.raises(IncompleteCatalog, match="must differ"):
            catalog.validate()


class TestFromConfig:
    def test_empty_config_uses_defaults(self):
        catalog = StatusEffectCatalog.from_config({})
        assert catalog.color_of("burning") == "green"
        assert catalog.buttons == ["tricolor", "red", "green", "blue"]

    def test_custom_effects(self):
        catalog = StatusEffectCatalog.from_config({
            "status_effects": {"Bleeding": "Red", "asleep": "blue"},
            "buttons": {"crimson": "red", "blue": "blue"},
            "unhealable": [],
            "uncurable_colors": [],
        })
        catalog.validate()
        assert catalog.color_of("bleeding") == "red"
        assert catalog.heal_button_for("red") == "crimson"
        assert "crimson" in catalog.buttons
