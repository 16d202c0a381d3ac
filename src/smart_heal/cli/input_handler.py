"""Parses typed commands for the interactive healing console."""
from __future__ import annotations

import re
from enum import Enum
from typing import Any


class UIMode(str, Enum):
    DEFAULT = "default"
    EDITING = "editing"
    HEALING = "healing"


# First match wins.
PATTERNS: list[tuple[str, re.Pattern]] = [
    ("help", re.compile(r"^(?:help|\?|commands)$", re.I)),
    ("quit", re.compile(r"^(?:quit|exit|q)$", re.I)),
    ("party", re.compile(r"^(?:party|status|frames|show)$", re.I)),
    ("edit", re.compile(r"^(?:edit|edit\s+mode)$", re.I)),
    ("random", re.compile(r"^(?:random|random\s+(?:status\s+)?effects?)$", re.I)),
    ("cancel", re.compile(r"^(?:cancel|esc|escape)$", re.I)),
    ("wait", re.compile(r"^(?:wait|advance|tick)(?:\s+(\d+))?(?:\s*ms)?$", re.I)),
    ("heal", re.compile(r"^heal\s+(\w+)(?:\s+(?:on\s+)?(\S+)(?:\s+(\S+))?)?$", re.I)),
    ("select", re.compile(r"^(?:select|press|use)\s+(\w+)$", re.I)),
    ("click", re.compile(r"^click(?:\s+(\S+)(?:\s+(\S+))?)?$", re.I)),
    ("set", re.compile(r"^set\s+(\S+)\s+(health|hp|max|max_health|team)\s+(\S+)$", re.I)),
    ("toggle", re.compile(r"^toggle\s+(\S+)\s+(\S+)$", re.I)),
]

_FIELD_ALIASES = {"hp": "health", "max": "max_health"}


class InputHandler:
    def classify(self, raw_input: str) -> dict[str, Any]:
        text = raw_input.strip()
        if not text:
            return {"command": None, "args": {}, "raw_input": raw_input}

        for command, pattern in PATTERNS:
            match = pattern.match(text)
            if not match:
                continue
            groups = match.groups()
            args: dict[str, Any] = {}
            if command == "wait":
                args["ms"] = int(groups[0]) if groups[0] else 100
            elif command == "heal":
                args = {"button": groups[0].lower(), "entity": groups[1], "effect": _lower(groups[2])}
            elif command == "select":
                args = {"button": groups[0].lower()}
            elif command == "click":
                args = {"entity": groups[0], "effect": _lower(groups[1])}
            elif command == "set":
                field = groups[1].lower()
                args = {"entity": groups[0], "field": _FIELD_ALIASES.get(field, field), "value": groups[2]}
            elif command == "toggle":
                args = {"entity": groups[0], "effect": groups[1].lower()}
            return {"command": command, "args": args, "raw_input": raw_input}

        return {"command": "unrecognized", "args": {}, "raw_input": raw_input}


def _lower(value: str | None) -> str | None:
    return value.lower() if value else None
