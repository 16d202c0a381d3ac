"""Tests for src/smart_heal/cli/input_handler.py."""
from __future__ import annotations

import pytest

from smart_heal.cli.input_handler import InputHandler


@pytest.fixture
def handler():
    return InputHandler()


class TestClassify:
    @pytest.mark.parametrize("text, command", [
        ("help", "help"), ("?", "help"), ("quit", "quit"), ("q", "quit"),
        ("party", "party"), ("status", "party"), ("edit", "edit"),
        ("random", "random"), ("random effects", "random"), ("cancel", "cancel"),
        ("esc", "cancel"), ("dance", "unrecognized"),
    ])
    def test_simple_commands(self, handler, text, command):
        assert handler.classify(text)["command"] == command

    def test_empty(self, handler):
        assert handler.classify("   ")["command"] is None

    @pytest.mark.parametrize("text, ms", [
        ("wait", 100), ("wait 250", 250), ("advance 1000ms", 1000), ("tick 5 ms", 5),
    ])
    def test_wait(self, handler, text, ms):
        result = handler.classify(text)
        assert result["command"] == "wait"
        assert result["args"] == {"ms": ms}

    def test_select(self, handler):
        assert handler.classify("select Green")["args"] == {"button": "green"}
        assert handler.classify("press red")["command"] == "select"

    @pytest.mark.parametrize("text, args", [
        ("click", {"entity": None, "effect": None}),
        ("click alice", {"entity": "alice", "effect": None}),
        ("click alice Burning", {"entity": "alice", "effect": "burning"}),
    ])
    def test_click(self, handler, text, args):
        result = handler.classify(text)
        assert result["command"] == "click"
        assert result["args"] == args

    @pytest.mark.parametrize("text, args", [
        ("heal tricolor", {"button": "tricolor", "entity": None, "effect": None}),
        ("heal red on carol", {"button": "red", "entity": "carol", "effect": None}),
        ("heal Blue bob asleep", {"button": "blue", "entity": "bob", "effect": "asleep"}),
    ])
    def test_heal(self, handler, text, args):
        result = handler.classify(text)
        assert result["command"] == "heal"
        assert result["args"] == args

    @pytest.mark.parametrize("text, field", [
        ("set alice health 400", "health"),
        ("set alice hp 400", "health"),
        ("set alice max 400", "max_health"),
        ("set alice team 400", "team"),
    ])
    def test_set_aliases(self, handler, text, field):
        args = handler.classify(text)["args"]
        assert args == {"entity": "alice", "field": field, "value": "400"}

    def test_toggle(self, handler):
        result = handler.classify("toggle bob Stasis")
        assert result["command"] == "toggle"
        assert result["args"] == {"entity": "bob", "effect": "stasis"}

    def test_raw_input_kept(self, handler):
        assert handler.classify("  help ")["raw_input"] == "  help "
