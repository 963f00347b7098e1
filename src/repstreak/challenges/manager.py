"""Challenge manager for workout challenge operations."""

import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..dates import today_in_timezone
from ..db.models import Challenge, ChallengeParticipant, Exercise, ExerciseProgress, User
from ..db.schemas import ChallengeStatus, NotificationType, ParticipantStatus, UserSummary
from ..db.sqlite import Database, get_db
from ..errors import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)
from ..friends.manager import FriendManager
from ..notifications.manager import NotificationManager
from ..users.manager import require_user, summarize
from .aggregator import (
    ChallengeSnapshot,
    build_leaderboard,
    past_challenge_summary,
    weekly_progress,
)
from .schemas import (
    ChallengeCreate,
    ChallengeCreated,
    ChallengeDetail,
    ExerciseResponse,
    ParticipantInfo,
    PastChallenge,
    PendingInvitation,
    TodaysChallenge,
    UserChallenge,
    WeeklyProgress,
)

logger = logging.getLogger(__name__)


def load_snapshot(challenge: Challenge) -> ChallengeSnapshot:
    """Snapshot a challenge loaded in an open session."""
    return ChallengeSnapshot(
        challenge=challenge,
        exercises=list(challenge.exercises),
        participants=list(challenge.participants),
        progress=list(challenge.progress),
    )


def load_user_snapshots(session: Session, user_id: str) -> list[ChallengeSnapshot]:
    """Snapshot every challenge the user has a participant row in."""
    stmt = (
        select(Challenge)
        .join(ChallengeParticipant, ChallengeParticipant.challenge_id == Challenge.id)
        .where(ChallengeParticipant.user_id == user_id)
        .options(
            selectinload(Challenge.exercises),
            selectinload(Challenge.participants),
            selectinload(Challenge.progress),
        )
        .order_by(Challenge.date.desc(), Challenge.created_at.desc())
    )
    challenges = session.execute(stmt).scalars().unique().all()
    return [load_snapshot(c) for c in challenges]


def _users_by_id(session: Session, user_ids: Iterable[str]) -> dict[str, UserSummary]:
    ids = set(user_ids)
    if not ids:
        return {}
    users = session.execute(select(User).where(User.id.in_(ids))).scalars().all()
    return {u.id: summarize(u) for u in users}


def _exercises(challenge: Challenge) -> list[ExerciseResponse]:
    return [ExerciseResponse.model_validate(e) for e in challenge.exercises]


class ChallengeManager:
    """Manages workout challenges, invitations and challenge views."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize challenge manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()
        self.notifications = NotificationManager(self.db)

    # -------------------------------------------------------------------------
    # Creation and lookup
    # -------------------------------------------------------------------------

    def create_challenge(self, user_id: str, data: ChallengeCreate) -> ChallengeCreated:
        """Create a challenge with its exercises and invite friends.

        The creator joins as an active participant; every friend gets an
        invited participant row and a notification. Nothing is written if
        any exercise or invitee is invalid.

        Args:
            user_id: Creator
            data: Challenge creation data

        Returns:
            IDs of the challenge and its exercises
        """
        if not data.exercises:
            raise InvalidInputError("At least one exercise is required")
        for exercise in data.exercises:
            if not exercise.name:
                raise InvalidInputError("Exercise name cannot be empty")
            if exercise.target_reps <= 0:
                raise InvalidInputError("Target reps must be greater than 0")

        friends = FriendManager(self.db)

        with self.db.get_session() as session:
            creator = require_user(session, user_id)

            challenge = Challenge(
                name=data.name,
                creator_id=user_id,
                date=data.date,
                status=ChallengeStatus.ACTIVE.value,
            )
            session.add(challenge)
            session.flush()

            exercises = []
            for i, item in enumerate(data.exercises):
                exercise = Exercise(
                    challenge_id=challenge.id,
                    name=item.name,
                    target_reps=item.target_reps,
                    order=i,
                )
                session.add(exercise)
                exercises.append(exercise)

            session.add(ChallengeParticipant(
                challenge_id=challenge.id,
                user_id=user_id,
                status=ParticipantStatus.ACTIVE.value,
            ))
            session.flush()

            for friend_id in dict.fromkeys(data.friend_ids):
                if session.get(User, friend_id) is None:
                    raise NotFoundError("One or more selected friends not found")
                if not friends.are_friends(user_id, friend_id, session=session):
                    raise PermissionDeniedError("One or more selected users are not your friends")

                participant = ChallengeParticipant(
                    challenge_id=challenge.id,
                    user_id=friend_id,
                    status=ParticipantStatus.INVITED.value,
                )
                session.add(participant)
                session.flush()

                self.notifications.create_notification(
                    friend_id,
                    f'{creator.name} invited you to the challenge "{data.name}" on {data.date}',
                    NotificationType.CHALLENGE_INVITATION,
                    related_id=participant.id,
                    session=session,
                )

            logger.info(
                "Created challenge %s for %s with %d exercises",
                challenge.id, data.date, len(exercises),
            )
            return ChallengeCreated(
                challenge_id=challenge.id,
                exercise_ids=[e.id for e in exercises],
            )

    def get_user_challenges(self, user_id: str) -> list[UserChallenge]:
        """Get every challenge the user takes part in, newest date first."""
        with self.db.get_session() as session:
            snapshots = load_user_snapshots(session, user_id)
            users = _users_by_id(session, (s.challenge.creator_id for s in snapshots))

            results = []
            for snapshot in snapshots:
                challenge = snapshot.challenge
                user_status = next(
                    (p.status for p in snapshot.participants if p.user_id == user_id), None
                )
                results.append(UserChallenge(
                    id=challenge.id,
                    name=challenge.name,
                    date=challenge.date,
                    status=ChallengeStatus(challenge.status),
                    creator_id=challenge.creator_id,
                    creator=users.get(challenge.creator_id),
                    exercises=_exercises(challenge),
                    participant_count=len(snapshot.participants),
                    user_status=ParticipantStatus(user_status) if user_status else None,
                ))
            return results

    def get_upcoming_challenges(
        self,
        user_id: str,
        timezone: Optional[str] = None,
        limit: int = 3,
        today: Optional[str] = None,
    ) -> list[UserChallenge]:
        """Future challenges the user has joined, soonest first."""
        today = today or today_in_timezone(timezone)
        upcoming = [
            c for c in self.get_user_challenges(user_id)
            if c.date > today and c.user_status == ParticipantStatus.ACTIVE
        ]
        upcoming.sort(key=lambda c: c.date)
        return upcoming[:limit]

    def get_challenge(self, user_id: str, challenge_id: str) -> ChallengeDetail:
        """Get challenge details for one of its participants."""
        with self.db.get_session() as session:
            challenge = session.get(Challenge, challenge_id)
            if challenge is None:
                raise NotFoundError("Challenge not found")

            participation = next(
                (p for p in challenge.participants if p.user_id == user_id), None
            )
            if participation is None:
                raise PermissionDeniedError("You are not a participant in this challenge")

            users = _users_by_id(
                session,
                [challenge.creator_id] + [p.user_id for p in challenge.participants],
            )

            return ChallengeDetail(
                id=challenge.id,
                name=challenge.name,
                date=challenge.date,
                status=ChallengeStatus(challenge.status),
                creator_id=challenge.creator_id,
                creator=users.get(challenge.creator_id),
                exercises=_exercises(challenge),
                participants=[
                    ParticipantInfo(
                        participant_id=p.id,
                        user_id=p.user_id,
                        status=ParticipantStatus(p.status),
                        user=users.get(p.user_id),
                    )
                    for p in challenge.participants
                ],
                user_status=ParticipantStatus(participation.status),
            )

    def get_todays_challenges(
        self,
        user_id: str,
        timezone: Optional[str] = None,
        today: Optional[str] = None,
    ) -> Optional[list[TodaysChallenge]]:
        """Get today's active challenges with a leaderboard for each.

        Args:
            user_id: Acting user
            timezone: IANA timezone used to derive today (UTC if omitted)
            today: Explicit ``YYYY-MM-DD`` overriding the timezone

        Returns:
            List of today's challenges, or None when there are none
        """
        today = today or today_in_timezone(timezone)

        with self.db.get_session() as session:
            snapshots = [
                s for s in load_user_snapshots(session, user_id)
                if s.challenge.date == today and s.is_active
            ]
            if not snapshots:
                return None

            user_ids = set()
            for snapshot in snapshots:
                user_ids.add(snapshot.challenge.creator_id)
                user_ids.update(p.user_id for p in snapshot.participants)
            users = _users_by_id(session, user_ids)

            return [
                TodaysChallenge(
                    id=s.challenge.id,
                    name=s.challenge.name,
                    date=s.challenge.date,
                    status=ChallengeStatus(s.challenge.status),
                    creator_id=s.challenge.creator_id,
                    creator=users.get(s.challenge.creator_id),
                    exercises=_exercises(s.challenge),
                    participants=build_leaderboard(s, users),
                    current_user_id=user_id,
                )
                for s in snapshots
            ]

    def get_past_challenges(
        self,
        user_id: str,
        timezone: Optional[str] = None,
        today: Optional[str] = None,
    ) -> list[PastChallenge]:
        """Summaries of challenges dated before today, newest first."""
        today = today or today_in_timezone(timezone)

        with self.db.get_session() as session:
            summaries = [
                past_challenge_summary(s, user_id)
                for s in load_user_snapshots(session, user_id)
                if s.challenge.date < today
            ]
        summaries.sort(key=lambda p: p.date, reverse=True)
        return summaries

    def get_weekly_progress(
        self,
        user_id: str,
        timezone: Optional[str] = None,
        today: Optional[str] = None,
    ) -> WeeklyProgress:
        """Completion overview of the current Monday-to-Sunday week."""
        today = today or today_in_timezone(timezone)

        with self.db.get_session() as session:
            return weekly_progress(load_user_snapshots(session, user_id), user_id, today)

    # -------------------------------------------------------------------------
    # Invitations
    # -------------------------------------------------------------------------

    def get_pending_invitations(self, user_id: str) -> list[PendingInvitation]:
        """Get challenge invitations awaiting the user's answer."""
        with self.db.get_session() as session:
            stmt = (
                select(ChallengeParticipant)
                .where(
                    ChallengeParticipant.user_id == user_id,
                    ChallengeParticipant.status == ParticipantStatus.INVITED.value,
                )
                .order_by(ChallengeParticipant.created_at)
            )
            invitations = session.execute(stmt).scalars().all()

            results = []
            for invitation in invitations:
                challenge = invitation.challenge
                if challenge is None:
                    continue
                creator = session.get(User, challenge.creator_id)
                results.append(PendingInvitation(
                    participant_id=invitation.id,
                    challenge_id=challenge.id,
                    challenge_name=challenge.name,
                    date=challenge.date,
                    creator_name=creator.name if creator else "Unknown",
                    exercise_count=len(challenge.exercises),
                    participant_count=len(challenge.participants),
                ))
            return results

    def _own_invitation(
        self,
        session: Session,
        user_id: str,
        participant_id: str,
        action: str,
    ) -> ChallengeParticipant:
        participation = session.get(ChallengeParticipant, participant_id)
        if participation is None:
            raise NotFoundError("Invitation not found")
        if participation.user_id != user_id:
            raise PermissionDeniedError(f"You are not authorized to {action} this invitation")
        if participation.status != ParticipantStatus.INVITED.value:
            raise InvalidStateError("This invitation has already been processed")
        return participation

    def accept_invitation(
        self,
        user_id: str,
        participant_id: str,
        session: Optional[Session] = None,
    ) -> None:
        """Accept an invitation; the participant becomes active."""

        def _accept(s: Session) -> None:
            current_user = require_user(s, user_id)
            participation = self._own_invitation(s, user_id, participant_id, "accept")
            participation.status = ParticipantStatus.ACTIVE.value

            challenge = participation.challenge
            if challenge:
                self.notifications.create_notification(
                    challenge.creator_id,
                    f'{current_user.name} accepted your invitation to "{challenge.name}"',
                    session=s,
                )
            logger.info("User %s accepted invitation %s", user_id, participant_id)

        if session:
            _accept(session)
            return
        with self.db.get_session() as s:
            _accept(s)

    def decline_invitation(
        self,
        user_id: str,
        participant_id: str,
        session: Optional[Session] = None,
    ) -> None:
        """Decline an invitation; the participant row is removed."""

        def _decline(s: Session) -> None:
            current_user = require_user(s, user_id)
            participation = self._own_invitation(s, user_id, participant_id, "decline")
            challenge = participation.challenge

            s.delete(participation)

            if challenge:
                self.notifications.create_notification(
                    challenge.creator_id,
                    f'{current_user.name} declined your invitation to "{challenge.name}"',
                    session=s,
                )
            logger.info("User %s declined invitation %s", user_id, participant_id)

        if session:
            _decline(session)
            return
        with self.db.get_session() as s:
            _decline(s)

    # -------------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------------

    def delete_challenge(self, user_id: str, challenge_id: str) -> None:
        """Delete a challenge with its exercises, participants and progress.

        Only the creator may delete; every other participant is notified.
        """
        with self.db.get_session() as session:
            current_user = require_user(session, user_id)
            challenge = session.get(Challenge, challenge_id)
            if challenge is None:
                raise NotFoundError("Challenge not found")
            if challenge.creator_id != user_id:
                raise PermissionDeniedError("Only the challenge creator can delete this challenge")

            for participant in challenge.participants:
                if participant.user_id != user_id:
                    self.notifications.create_notification(
                        participant.user_id,
                        f'Challenge "{challenge.name}" has been cancelled by {current_user.name}',
                        session=session,
                    )

            session.delete(challenge)
            logger.info("Deleted challenge %s", challenge_id)

    def leave_challenge(self, user_id: str, challenge_id: str) -> None:
        """Leave a challenge, dropping the user's progress in it.

        Creators cannot leave; they delete the challenge instead.
        """
        with self.db.get_session() as session:
            current_user = require_user(session, user_id)
            challenge = session.get(Challenge, challenge_id)
            if challenge is None:
                raise NotFoundError("Challenge not found")
            if challenge.creator_id == user_id:
                raise InvalidStateError(
                    "Challenge creators cannot leave. Delete the challenge instead."
                )

            participation = next(
                (p for p in challenge.participants if p.user_id == user_id), None
            )
            if participation is None:
                raise PermissionDeniedError("You are not a participant in this challenge")

            stmt = select(ExerciseProgress).where(
                ExerciseProgress.challenge_id == challenge_id,
                ExerciseProgress.user_id == user_id,
            )
            for record in session.execute(stmt).scalars():
                session.delete(record)
            session.delete(participation)

            self.notifications.create_notification(
                challenge.creator_id,
                f'{current_user.name} left your challenge "{challenge.name}"',
                session=session,
            )
            logger.info("User %s left challenge %s", user_id, challenge_id)
