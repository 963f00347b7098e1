"""Database module for local SQLite storage."""

from .models import (
    Base,
    Challenge,
    ChallengeParticipant,
    Exercise,
    ExerciseProgress,
    User,
)
from .schemas import ChallengeStatus, NotificationType, ParticipantStatus
from .sqlite import Database, get_db, reset_db

__all__ = [
    "Base",
    "Challenge",
    "ChallengeParticipant",
    "Exercise",
    "ExerciseProgress",
    "User",
    "ChallengeStatus",
    "NotificationType",
    "ParticipantStatus",
    "Database",
    "get_db",
    "reset_db",
]
