"""Tests for completion percentage calculation."""

import pytest

from repstreak.progress.completion import (
    CompletionTotals,
    clamp_reps,
    completion_percentage,
    completion_totals,
    percentage,
)


class TestClampReps:
    """Tests for clamping completed reps."""

    def test_within_target(self):
        assert clamp_reps(10, 7) == 7

    def test_above_target(self):
        """Test that overshoot counts as the target."""
        assert clamp_reps(10, 15) == 10

    def test_negative(self):
        assert clamp_reps(10, -3) == 0


class TestCompletionPercentage:
    """Tests for completion_percentage."""

    def test_empty(self):
        """Test that no exercises means 0%."""
        assert completion_percentage([]) == 0

    def test_overshoot_is_clamped(self):
        assert completion_percentage([(10, 15)]) == 100

    def test_aggregates_over_exercises(self):
        """Test that reps are summed before dividing."""
        assert completion_percentage([(10, 5), (10, 0)]) == 25

    def test_overshoot_does_not_cover_other_exercises(self):
        """Test that extra reps on one exercise don't fill another."""
        assert completion_percentage([(10, 30), (10, 0)]) == 50

    def test_zero_target(self):
        assert completion_percentage([(0, 5)]) == 0

    def test_rounds_half_up(self):
        """Test 1/8 = 12.5% rounds up to 13, not to even."""
        assert completion_percentage([(8, 1)]) == 13
        assert percentage(1, 200) == 1  # 0.5%

    def test_rounds_down_below_half(self):
        assert completion_percentage([(3, 1)]) == 33

    @pytest.mark.parametrize(
        "pairs",
        [
            [(1, 1000)],
            [(7, -4), (3, 3)],
            [(100, 99), (1, 0)],
            [(50, 51), (50, 49)],
        ],
    )
    def test_always_within_bounds(self, pairs):
        assert 0 <= completion_percentage(pairs) <= 100


class TestCompletionTotals:
    """Tests for completion_totals."""

    def test_totals(self):
        totals = completion_totals([(10, 15), (20, 5)])

        assert totals == CompletionTotals(
            total_completed=15, total_target=30, completion_percentage=50
        )
        assert not totals.is_complete

    def test_complete(self):
        totals = completion_totals([(10, 10), (5, 6)])
        assert totals.is_complete
        assert totals.completion_percentage == 100

    def test_empty_is_not_complete(self):
        assert not completion_totals([]).is_complete

    def test_accepts_generator(self):
        totals = completion_totals((t, c) for t, c in [(4, 2), (4, 2)])
        assert totals.completion_percentage == 50
