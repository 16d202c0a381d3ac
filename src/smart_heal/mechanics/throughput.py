"""Party throughput model: group heals must never reward splitting a party.

Throughput is measured in "percent of max health" summed over members, which
is what a group heal restores regardless of individual pools.
"""
from __future__ import annotations

from dataclasses import dataclass

from smart_heal.mechanics.healing_math import group_heal_percent


def cast_throughput(party_size: int, base_percent: float, reduction_percent: float) -> float:
    """Total percent restored by one group heal over a party of *party_size*."""
    return party_size * group_heal_percent(base_percent, party_size, reduction_percent)


def window_throughput(
    party_sizes: list[int],
    base_percent: float,
    reduction_percent: float,
    cooldown_ms: int,
    window_ms: int,
) -> float:
    """Total restored by one healer alternating group heals across sub-parties.

    Every cast consumes the healer's single shared cooldown, so within
    *window_ms* the healer gets ``window_ms // cooldown_ms`` casts, spread
    round-robin over the sub-parties.
    """
    if not party_sizes or cooldown_ms <= 0:
        return 0.0
    casts = window_ms // cooldown_ms
    total = 0.0
    for i in range(casts):
        size = party_sizes[i % len(party_sizes)]
        total += cast_throughput(size, base_percent, reduction_percent)
    return total


@dataclass
class SplitViolation:
    first: int
    second: int
    merged: float
    split: float


def splitting_is_never_better(
    first: int,
    second: int,
    base_percent: float,
    reduction_percent: float,
    cooldown_ms: int,
) -> bool:
    """True if healing the merged party beats healing the two halves separately.

    Compared over a window of two cooldowns: two casts on the merged party
    against one cast on each half.
    """
    window = 2 * cooldown_ms
    merged = window_throughput([first + second], base_percent, reduction_percent, cooldown_ms, window)
    split = window_throughput([first, second], base_percent, reduction_percent, cooldown_ms, window)
    return merged >= split


def find_split_violations(
    max_party_size: int,
    base_percent: float,
    reduction_percent: float,
    cooldown_ms: int,
) -> list[SplitViolation]:
    """Every (first, second) split with first + second <= max_party_size that favors splitting."""
    violations: list[SplitViolation] = []
    window = 2 * cooldown_ms
    for first in range(1, max_party_size):
        for second in range(first, max_party_size - first + 1):
            if splitting_is_never_better(first, second, base_percent, reduction_percent, cooldown_ms):
                continue
            violations.append(SplitViolation(
                first=first,
                second=second,
                merged=window_throughput([first + second], base_percent, reduction_percent, cooldown_ms, window),
                split=window_throughput([first, second], base_percent, reduction_percent, cooldown_ms, window),
            ))
    return violations
