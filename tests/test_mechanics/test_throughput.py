"""Tests for src/smart_heal/mechanics/throughput.py."""
from __future__ import annotations

import pytest

from smart_heal.mechanics.throughput import (
    cast_throughput,
    find_split_violations,
    splitting_is_never_better,
    window_throughput,
)


class TestCastThroughput:
    def test_single_member(self):
        assert cast_throughput(1, 30, 5) == pytest.approx(30)

    def test_pair(self):
        assert cast_throughput(2, 30, 5) == pytest.approx(57)


class TestWindowThroughput:
    def test_casts_per_window(self):
        # Three casts of 30% fit into 3000 ms at a 1000 ms cooldown
        assert window_throughput([1], 30, 5, 1000, 3000) == pytest.approx(90)

    def test_round_robin(self):
        expected = cast_throughput(2, 30, 5) + cast_throughput(3, 30, 5)
        assert window_throughput([2, 3], 30, 5, 1000, 2000) == pytest.approx(expected)

    def test_empty(self):
        assert window_throughput([], 30, 5, 1000, 2000) == 0.0
        assert window_throughput([2], 30, 5, 0, 2000) == 0.0


class TestSplitting:
    def test_two_plus_two(self):
        assert splitting_is_never_better(2, 2, 30, 5, 1000)

    def test_default_tuning_has_no_violations(self):
        assert find_split_violations(8, 30, 5, 1000) == []

    def test_harsh_reduction_rewards_splitting(self):
        # 60% penalty per extra member: two solo heals beat one heal on a pair
        assert not splitting_is_never_better(1, 1, 30, 60, 1000)
        violations = find_split_violations(2, 30, 60, 1000)
        assert len(violations) == 1
        v = violations[0]
        assert (v.first, v.second) == (1, 1)
        assert v.split > v.merged
