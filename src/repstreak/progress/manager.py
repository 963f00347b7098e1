"""Progress manager for logging completed reps."""

import logging
from typing import Optional

from sqlalchemy import select

from ..challenges.schemas import ExerciseProgressItem
from ..db.models import ChallengeParticipant, Exercise, ExerciseProgress
from ..db.sqlite import Database, get_db
from ..errors import InvalidInputError, NotFoundError, PermissionDeniedError
from .completion import CompletionTotals, completion_totals

logger = logging.getLogger(__name__)


class ProgressManager:
    """Manages per-exercise progress records."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize progress manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def update_exercise_progress(
        self,
        user_id: str,
        exercise_id: str,
        completed_reps: int,
    ) -> str:
        """Set the user's completed reps for an exercise.

        Upserts on (exercise, user); the last write wins. Reps above the
        target are stored as given.

        Args:
            user_id: Acting user, must participate in the challenge
            exercise_id: Exercise to update
            completed_reps: New rep count, not negative

        Returns:
            ID of the progress record
        """
        if completed_reps < 0:
            raise InvalidInputError("Completed reps cannot be negative")

        with self.db.get_session() as session:
            exercise = session.get(Exercise, exercise_id)
            if exercise is None:
                raise NotFoundError("Exercise not found")

            participation = session.execute(
                select(ChallengeParticipant.id).where(
                    ChallengeParticipant.challenge_id == exercise.challenge_id,
                    ChallengeParticipant.user_id == user_id,
                )
            ).first()
            if participation is None:
                raise PermissionDeniedError("You are not a participant in this challenge")

            stmt = select(ExerciseProgress).where(
                ExerciseProgress.exercise_id == exercise_id,
                ExerciseProgress.user_id == user_id,
            )
            progress = session.execute(stmt).scalar_one_or_none()

            if progress:
                progress.completed_reps = completed_reps
            else:
                progress = ExerciseProgress(
                    exercise_id=exercise_id,
                    user_id=user_id,
                    challenge_id=exercise.challenge_id,
                    completed_reps=completed_reps,
                )
                session.add(progress)

            session.flush()
            logger.debug("Progress %s/%s = %d", exercise_id, user_id, completed_reps)
            return progress.id

    def get_progress(self, user_id: str, exercise_id: str) -> Optional[ExerciseProgress]:
        """Get the progress record for one exercise, if any."""
        with self.db.get_session() as session:
            stmt = select(ExerciseProgress).where(
                ExerciseProgress.exercise_id == exercise_id,
                ExerciseProgress.user_id == user_id,
            )
            progress = session.execute(stmt).scalar_one_or_none()
            if progress:
                session.expunge(progress)
            return progress

    def get_challenge_progress(self, user_id: str, challenge_id: str) -> list[ExerciseProgressItem]:
        """Per-exercise progress of a user on one challenge, in exercise order."""
        with self.db.get_session() as session:
            exercises = session.execute(
                select(Exercise)
                .where(Exercise.challenge_id == challenge_id)
                .order_by(Exercise.order)
            ).scalars().all()

            records = session.execute(
                select(ExerciseProgress).where(
                    ExerciseProgress.challenge_id == challenge_id,
                    ExerciseProgress.user_id == user_id,
                )
            ).scalars().all()
            reps = {r.exercise_id: r.completed_reps for r in records}

            return [
                ExerciseProgressItem(
                    exercise_id=e.id,
                    exercise_name=e.name,
                    target_reps=e.target_reps,
                    completed_reps=reps.get(e.id, 0),
                )
                for e in exercises
            ]

    def get_challenge_totals(self, user_id: str, challenge_id: str) -> CompletionTotals:
        """Clamped totals of a user on one challenge."""
        items = self.get_challenge_progress(user_id, challenge_id)
        return completion_totals((i.target_reps, i.completed_reps) for i in items)
