"""Healing arithmetic. Pure functions, no state."""
from __future__ import annotations

import math


def group_heal_percent(base_percent: float, group_size: int, reduction_percent: float) -> float:
    """Percent applied to each member of a group heal.

    The penalty compounds per additional member:
    ``base * ((100 - reduction) / 100) ** (group_size - 1)``.
    """
    if group_size < 1:
        return 0.0
    return base_percent * ((100 - reduction_percent) / 100) ** (group_size - 1)


def heal_result(health: int, max_health: int, percent: float) -> tuple[int, int]:
    """Return (new_health, overheal_gained) for healing *percent* of max health."""
    raw = math.floor(health + max_health * percent / 100)
    if raw > max_health:
        return max_health, raw - max_health
    return raw, 0


def decay_overheal(overheal: int, factor: float = 0.5) -> int:
    """One decay tick. The reference factor halves the value each tick."""
    return max(0, math.floor(overheal * factor))
