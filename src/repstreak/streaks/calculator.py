"""Streak calculation over completed calendar days."""

from datetime import date, timedelta
from typing import Iterable, Optional

from ..dates import parse_date
from .schemas import UserStreak


def _to_days(completed_dates: Iterable[str]) -> set[date]:
    return {parse_date(d) for d in completed_dates}


def current_run(completed_dates: Iterable[str], today: str) -> int:
    """Count consecutive complete days walking back from today.

    An incomplete today does not break the run; the count then starts
    from yesterday. The walk stops at the first incomplete earlier day.
    """
    days = _to_days(completed_dates)
    day = parse_date(today)

    streak = 0
    i = 0
    while True:
        check = day - timedelta(days=i)
        if check in days:
            streak += 1
        elif i > 0:
            break
        i += 1
    return streak


def longest_run(completed_dates: Iterable[str]) -> int:
    """Length of the longest run of calendar-consecutive dates."""
    days = sorted(_to_days(completed_dates))

    longest = 0
    run = 0
    previous: Optional[date] = None
    for day in days:
        if previous is not None and (day - previous).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def calculate_streak(completed_dates: Iterable[str], today: str) -> UserStreak:
    """Compute current streak, longest streak and last completed date.

    Args:
        completed_dates: ``YYYY-MM-DD`` days with 100% aggregate completion
        today: Today's ``YYYY-MM-DD`` in the caller's timezone

    Returns:
        UserStreak
    """
    dates = set(completed_dates)
    last_completed = max(dates, key=parse_date) if dates else None

    return UserStreak(
        current_streak=current_run(dates, today),
        longest_streak=longest_run(dates),
        last_completed_date=last_completed,
    )
