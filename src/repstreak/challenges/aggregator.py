"""Per-user and per-challenge aggregation of exercise progress.

Works on ``ChallengeSnapshot`` objects that were already loaded from the
database, so every function here is a pure read over in-memory data.
Missing progress counts as zero completed reps and completed reps are
clamped to the exercise target before they are summed.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..dates import week_dates
from ..db.models import Challenge, ChallengeParticipant, Exercise, ExerciseProgress
from ..db.schemas import ParticipantStatus, UserSummary
from ..progress.completion import CompletionTotals, completion_totals
from .schemas import (
    DayProgress,
    ExerciseProgressItem,
    ParticipantProgress,
    PastChallenge,
    WeeklyProgress,
)


@dataclass
class ChallengeSnapshot:
    """A challenge with its exercises, participants and progress records."""

    challenge: Challenge
    exercises: list[Exercise] = field(default_factory=list)
    participants: list[ChallengeParticipant] = field(default_factory=list)
    progress: list[ExerciseProgress] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.challenge.is_active

    def has_participant(self, user_id: str) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def ordered_exercises(self) -> list[Exercise]:
        return sorted(self.exercises, key=lambda e: e.order or 0)

    def completed_reps(self, exercise_id: str, user_id: str) -> int:
        """Stored reps for one exercise and user, 0 when nothing was logged."""
        for record in self.progress:
            if record.exercise_id == exercise_id and record.user_id == user_id:
                return record.completed_reps or 0
        return 0


def exercise_breakdown(snapshot: ChallengeSnapshot, user_id: str) -> list[ExerciseProgressItem]:
    """Per-exercise progress of one user, in exercise order.

    Reps are reported as stored; clamping happens in the totals.
    """
    return [
        ExerciseProgressItem(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            target_reps=exercise.target_reps,
            completed_reps=snapshot.completed_reps(exercise.id, user_id),
        )
        for exercise in snapshot.ordered_exercises()
    ]


def user_totals(snapshot: ChallengeSnapshot, user_id: str) -> CompletionTotals:
    """Clamped completed/target totals of one user on one challenge."""
    return completion_totals(
        (exercise.target_reps, snapshot.completed_reps(exercise.id, user_id))
        for exercise in snapshot.exercises
    )


def participant_summary(
    snapshot: ChallengeSnapshot,
    participant: ChallengeParticipant,
    users: Optional[dict[str, UserSummary]] = None,
) -> ParticipantProgress:
    """Breakdown and totals for one participant."""
    breakdown = exercise_breakdown(snapshot, participant.user_id)
    totals = completion_totals((item.target_reps, item.completed_reps) for item in breakdown)

    return ParticipantProgress(
        participant_id=participant.id,
        user_id=participant.user_id,
        status=ParticipantStatus(participant.status),
        user=(users or {}).get(participant.user_id),
        exercise_progress=breakdown,
        total_completed=totals.total_completed,
        total_target=totals.total_target,
        completion_percentage=totals.completion_percentage,
        is_completed=totals.completion_percentage == 100,
    )


def build_leaderboard(
    snapshot: ChallengeSnapshot,
    users: Optional[dict[str, UserSummary]] = None,
) -> list[ParticipantProgress]:
    """Participants sorted by total completed reps, highest first.

    The sort is stable: ties keep participant order (creation order when
    the snapshot was loaded from the database).
    """
    summaries = [participant_summary(snapshot, p, users) for p in snapshot.participants]
    return sorted(summaries, key=lambda s: s.total_completed, reverse=True)


def past_challenge_summary(snapshot: ChallengeSnapshot, user_id: str) -> PastChallenge:
    """Summary of one user's result on a challenge."""
    totals = user_totals(snapshot, user_id)
    challenge = snapshot.challenge

    return PastChallenge(
        challenge_id=challenge.id,
        name=challenge.name,
        date=challenge.date,
        total_exercises=len(snapshot.exercises),
        user_completed_reps=totals.total_completed,
        user_total_target=totals.total_target,
        completion_percentage=totals.completion_percentage,
        participant_count=len(snapshot.participants),
        is_completed=totals.completion_percentage == 100,
    )


def _counted(snapshots: Iterable[ChallengeSnapshot], user_id: str) -> list[ChallengeSnapshot]:
    # Active challenges with at least one exercise that the user belongs to
    return [
        s for s in snapshots
        if s.is_active and s.exercises and s.has_participant(user_id)
    ]


def daily_totals(
    snapshots: Iterable[ChallengeSnapshot],
    user_id: str,
) -> dict[str, CompletionTotals]:
    """Aggregate totals per calendar day across that day's challenges."""
    pairs_by_date: dict[str, list[tuple[int, int]]] = defaultdict(list)
    for snapshot in _counted(snapshots, user_id):
        for exercise in snapshot.exercises:
            pairs_by_date[snapshot.challenge.date].append(
                (exercise.target_reps, snapshot.completed_reps(exercise.id, user_id))
            )
    return {day: completion_totals(pairs) for day, pairs in pairs_by_date.items()}


def completed_dates(snapshots: Iterable[ChallengeSnapshot], user_id: str) -> set[str]:
    """Days on which the user completed 100% of all that day's challenges."""
    return {
        day for day, totals in daily_totals(snapshots, user_id).items()
        if totals.total_completed >= totals.total_target
    }


def weekly_progress(
    snapshots: Iterable[ChallengeSnapshot],
    user_id: str,
    today: str,
) -> WeeklyProgress:
    """Monday-to-Sunday overview of the week containing ``today``."""
    counted = _counted(snapshots, user_id)
    week = week_dates(today)
    done = completed_dates(counted, user_id)

    days = []
    completed_challenges = 0
    for day in week:
        on_day = [s for s in counted if s.challenge.date == day]
        completed_challenges += sum(
            1 for s in on_day if user_totals(s, user_id).completion_percentage == 100
        )
        days.append(DayProgress(
            date=day,
            challenge_count=len(on_day),
            is_completed=day in done,
        ))

    return WeeklyProgress(
        days_with_challenges=days,
        completed_challenges_this_week=completed_challenges,
    )
