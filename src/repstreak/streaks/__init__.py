"""Completion streaks module."""

from .calculator import calculate_streak, current_run, longest_run
from .manager import StreakManager
from .schemas import UserStreak

__all__ = [
    "StreakManager",
    "UserStreak",
    "calculate_streak",
    "current_run",
    "longest_run",
]
