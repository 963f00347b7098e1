"""SQLAlchemy ORM models for the local SQLite store.

Tables:
- users: Known identities
- challenges: Dated workout challenges
- exercises: Target exercises of a challenge
- challenge_participants: Membership and invitation state
- exercise_progress: Completed reps per (exercise, user)
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .schemas import ChallengeStatus, ParticipantStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now() -> str:
    """Current UTC timestamp as an ISO string."""
    return datetime.now(timezone.utc).isoformat()


class User(Base):
    """User model - one row per identity token."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    token_identifier: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    email: Mapped[Optional[str]] = mapped_column(String(320), index=True)

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}')>"


class Challenge(Base):
    """Challenge model - a named set of exercises for one calendar day."""

    __tablename__ = "challenges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    creator_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Calendar day, YYYY-MM-DD. Fixed once created.
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)

    status: Mapped[str] = mapped_column(String(20), default=ChallengeStatus.ACTIVE.value)

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)

    # Relationships
    exercises: Mapped[list["Exercise"]] = relationship(
        "Exercise",
        back_populates="challenge",
        cascade="all, delete-orphan",
        order_by="Exercise.order",
    )
    participants: Mapped[list["ChallengeParticipant"]] = relationship(
        "ChallengeParticipant",
        back_populates="challenge",
        cascade="all, delete-orphan",
        order_by="ChallengeParticipant.created_at",
    )
    progress: Mapped[list["ExerciseProgress"]] = relationship(
        "ExerciseProgress",
        back_populates="challenge",
        cascade="all, delete-orphan",
    )
    creator: Mapped["User"] = relationship("User")

    __table_args__ = (Index("ix_challenges_creator_date", "creator_id", "date"),)

    def __repr__(self) -> str:
        return f"<Challenge(id={self.id}, name='{self.name}', date={self.date})>"

    @property
    def is_active(self) -> bool:
        """Check if the challenge counts toward completion and streaks."""
        return self.status == ChallengeStatus.ACTIVE.value


class Exercise(Base):
    """Exercise model - one target exercise inside a challenge."""

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    challenge_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    target_reps: Mapped[int] = mapped_column(Integer, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0)

    challenge: Mapped["Challenge"] = relationship("Challenge", back_populates="exercises")

    def __repr__(self) -> str:
        return f"<Exercise(name='{self.name}', target={self.target_reps})>"


class ChallengeParticipant(Base):
    """Participant model - a user's membership in a challenge."""

    __tablename__ = "challenge_participants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    challenge_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), default=ParticipantStatus.INVITED.value)

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)

    challenge: Mapped["Challenge"] = relationship("Challenge", back_populates="participants")
    user: Mapped["User"] = relationship("User")

    __table_args__ = (
        UniqueConstraint("challenge_id", "user_id", name="uq_challenge_participant"),
    )

    def __repr__(self) -> str:
        return f"<ChallengeParticipant(user_id={self.user_id}, status={self.status})>"


class ExerciseProgress(Base):
    """Progress model - completed reps for one (exercise, user) pair.

    Reps above the exercise target are stored as entered and clamped only
    when aggregated.
    """

    __tablename__ = "exercise_progress"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    exercise_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("exercises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    challenge_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
    )
    completed_reps: Mapped[int] = mapped_column(Integer, default=0)

    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now, onupdate=utc_now)

    challenge: Mapped["Challenge"] = relationship("Challenge", back_populates="progress")
    exercise: Mapped["Exercise"] = relationship("Exercise")

    __table_args__ = (
        UniqueConstraint("exercise_id", "user_id", name="uq_exercise_progress_user"),
        Index("ix_exercise_progress_challenge_user", "challenge_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<ExerciseProgress(exercise_id={self.exercise_id}, reps={self.completed_reps})>"
