"""Workout challenges module.

Provides functionality for:
- Creating challenges with exercises and inviting friends
- Accepting, declining and leaving challenges
- Today's leaderboard, past results and weekly overview
"""

from .aggregator import ChallengeSnapshot
from .manager import ChallengeManager
from .schemas import (
    ChallengeCreate,
    ChallengeCreated,
    ChallengeDetail,
    ExerciseInput,
    PastChallenge,
    PendingInvitation,
    TodaysChallenge,
    UserChallenge,
    WeeklyProgress,
)

__all__ = [
    "ChallengeManager",
    "ChallengeSnapshot",
    "ChallengeCreate",
    "ChallengeCreated",
    "ChallengeDetail",
    "ExerciseInput",
    "PastChallenge",
    "PendingInvitation",
    "TodaysChallenge",
    "UserChallenge",
    "WeeklyProgress",
]
