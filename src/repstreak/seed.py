"""Historical demo data for existing users.

Populates the past month with challenges so the dashboard views, weekly
progress and streaks have something to show.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy import delete, func, select

from .dates import shift_date, today_in_timezone
from .db.models import Challenge, ChallengeParticipant, Exercise, ExerciseProgress, User
from .db.schemas import ChallengeStatus, ParticipantStatus
from .db.sqlite import Database, get_db

logger = logging.getLogger(__name__)

CHALLENGE_NAMES = [
    "Morning Pump",
    "Lunch Grind",
    "Evening Burn",
    "Full Body Blast",
    "Core Crusher",
    "Upper Body Focus",
    "Leg Day",
    "Cardio Mix",
    "Strength Session",
    "Quick HIIT",
]

# name, min reps, max reps
EXERCISE_POOL = [
    ("Push-ups", 20, 50),
    ("Squats", 30, 60),
    ("Lunges", 20, 40),
    ("Burpees", 10, 25),
    ("Plank (seconds)", 30, 60),
    ("Crunches", 30, 50),
    ("Mountain Climbers", 20, 40),
    ("Jumping Jacks", 40, 80),
    ("Tricep Dips", 15, 30),
    ("Pull-ups", 5, 15),
]

WEEKDAY_CHANCE = 0.8
WEEKEND_CHANCE = 0.5


@dataclass
class SeedResult:
    """Outcome of a seeding run."""

    success: bool
    message: str
    stats: dict[str, int] = field(default_factory=dict)


def completion_rate(rng: random.Random) -> float:
    """Draw a completion rate: mostly full, sometimes partial, rarely skipped."""
    roll = rng.random()
    if roll < 0.6:
        return 1.0
    if roll < 0.85:
        return 0.5 + rng.random() * 0.4
    return rng.random() * 0.3


def completed_reps_for(target: int, rate: float, rng: random.Random) -> int:
    """Reps done at a completion rate with +/-5% noise, kept within target."""
    base = int(target * rate)
    variation = int(base * (rng.random() * 0.1 - 0.05))
    return max(0, min(target, base + variation))


def is_weekend(day: str) -> bool:
    return date.fromisoformat(day).weekday() >= 5


def seed_historical_data(
    db: Optional[Database] = None,
    days: int = 30,
    rng: Optional[random.Random] = None,
    today: Optional[str] = None,
) -> SeedResult:
    """Create past challenges for every existing user.

    Each of the ``days`` days before today may get one challenge, created
    by the users in rotation, with every user as an active participant.
    Progress rows are only written when some reps were done.

    Args:
        db: Database instance
        days: How many past days to cover
        rng: Random source, seed it for reproducible data
        today: Reference day, defaults to today in UTC

    Returns:
        SeedResult with per-table counts
    """
    db = db or get_db()
    rng = rng or random.Random()
    today = today or today_in_timezone()

    stats = {
        "users_found": 0,
        "challenges_created": 0,
        "exercises_created": 0,
        "participants_created": 0,
        "progress_records_created": 0,
    }

    with db.get_session() as session:
        users = session.execute(select(User).order_by(User.created_at)).scalars().all()
        if not users:
            return SeedResult(False, "No users found. Please create users first.", stats)
        stats["users_found"] = len(users)

        for days_ago in range(1, days + 1):
            day = shift_date(today, -days_ago)
            chance = WEEKEND_CHANCE if is_weekend(day) else WEEKDAY_CHANCE
            if rng.random() >= chance:
                continue

            creator = users[days_ago % len(users)]
            challenge = Challenge(
                name=rng.choice(CHALLENGE_NAMES),
                creator_id=creator.id,
                date=day,
                status=ChallengeStatus.ACTIVE.value,
            )
            session.add(challenge)
            session.flush()
            stats["challenges_created"] += 1

            picked = rng.sample(EXERCISE_POOL, rng.randint(2, 4))
            exercises = []
            for order, (name, low, high) in enumerate(picked):
                exercise = Exercise(
                    challenge_id=challenge.id,
                    name=name,
                    target_reps=rng.randint(low, high),
                    order=order,
                )
                session.add(exercise)
                exercises.append(exercise)
            session.flush()
            stats["exercises_created"] += len(exercises)

            for user in users:
                session.add(ChallengeParticipant(
                    challenge_id=challenge.id,
                    user_id=user.id,
                    status=ParticipantStatus.ACTIVE.value,
                ))
                stats["participants_created"] += 1

                rate = completion_rate(rng)
                for exercise in exercises:
                    reps = completed_reps_for(exercise.target_reps, rate, rng)
                    if reps > 0:
                        session.add(ExerciseProgress(
                            exercise_id=exercise.id,
                            user_id=user.id,
                            challenge_id=challenge.id,
                            completed_reps=reps,
                        ))
                        stats["progress_records_created"] += 1

    logger.info("Seeded %d challenges for %d users", stats["challenges_created"], len(users))
    return SeedResult(
        True,
        f"Successfully seeded historical data for {len(users)} users over {days} days.",
        stats,
    )


def clear_all_challenge_data(db: Optional[Database] = None) -> SeedResult:
    """Delete all challenges with their exercises, participants and progress.

    Users, friendships and notifications are left alone.
    """
    db = db or get_db()
    stats = {}

    with db.get_session() as session:
        # Children first so foreign keys never dangle
        for key, model in (
            ("progress_deleted", ExerciseProgress),
            ("exercises_deleted", Exercise),
            ("participants_deleted", ChallengeParticipant),
            ("challenges_deleted", Challenge),
        ):
            stats[key] = session.execute(
                select(func.count()).select_from(model)
            ).scalar() or 0
            session.execute(delete(model))

    logger.info("Cleared challenge data: %s", stats)
    return SeedResult(True, "All challenge data has been cleared.", stats)
