"""Completion percentage calculation.

Turns (target reps, completed reps) pairs into clamped totals and an
integer percentage. Pure functions with no database access.
"""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class CompletionTotals:
    """Clamped totals for one user on one or more challenges."""

    total_completed: int = 0
    total_target: int = 0
    completion_percentage: int = 0

    @property
    def is_complete(self) -> bool:
        """True when every target rep has been completed."""
        return self.total_target > 0 and self.total_completed >= self.total_target


def clamp_reps(target_reps: int, completed_reps: int) -> int:
    """Clamp completed reps into ``[0, target_reps]``.

    Example:
        >>> clamp_reps(10, 15)
        10
        >>> clamp_reps(10, -3)
        0
    """
    return max(0, min(completed_reps, target_reps))


def percentage(completed: int, target: int) -> int:
    """Integer percentage of ``completed / target``, rounded half up.

    Returns 0 when the target is 0.
    """
    if target <= 0:
        return 0
    # floor(100 * c / t + 1/2) in integer arithmetic
    return (200 * completed + target) // (2 * target)


def completion_totals(pairs: Iterable[tuple[int, int]]) -> CompletionTotals:
    """Sum clamped completed reps and targets over (target, completed) pairs.

    Args:
        pairs: ``(target_reps, completed_reps)`` tuples

    Returns:
        CompletionTotals with the clamped sums and the percentage
    """
    total_completed = 0
    total_target = 0
    for target_reps, completed_reps in pairs:
        total_completed += clamp_reps(target_reps, completed_reps)
        total_target += target_reps

    return CompletionTotals(
        total_completed=total_completed,
        total_target=total_target,
        completion_percentage=percentage(total_completed, total_target),
    )


def completion_percentage(pairs: Iterable[tuple[int, int]]) -> int:
    """Completion percentage (0-100) over (target, completed) pairs.

    Example:
        >>> completion_percentage([])
        0
        >>> completion_percentage([(10, 15)])
        100
        >>> completion_percentage([(10, 5), (10, 0)])
        25
    """
    return completion_totals(pairs).completion_percentage
