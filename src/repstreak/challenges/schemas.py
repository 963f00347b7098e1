"""Pydantic schemas for workout challenges."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..dates import is_valid_date
from ..db.schemas import ChallengeStatus, ParticipantStatus, UserSummary


class ExerciseInput(BaseModel):
    """An exercise supplied when creating a challenge."""

    name: str = Field(..., max_length=200)
    target_reps: int

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Trim surrounding whitespace."""
        return v.strip()


class ChallengeCreate(BaseModel):
    """Schema for creating a challenge."""

    name: str = Field(..., min_length=1, max_length=200)
    date: str = Field(..., description="Calendar day, YYYY-MM-DD")
    exercises: list[ExerciseInput] = Field(default_factory=list)
    friend_ids: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Trim surrounding whitespace and reject blank names."""
        v = v.strip()
        if not v:
            raise ValueError("Challenge name cannot be empty")
        return v

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        """Require a YYYY-MM-DD calendar date."""
        if not is_valid_date(v):
            raise ValueError("date must be a YYYY-MM-DD calendar date")
        return v


class ChallengeCreated(BaseModel):
    """Identifiers returned after creating a challenge."""

    challenge_id: str
    exercise_ids: list[str]


class ExerciseResponse(BaseModel):
    """Schema for exercise responses."""

    id: str
    challenge_id: str
    name: str
    target_reps: int
    order: int

    model_config = {"from_attributes": True}


class ExerciseProgressItem(BaseModel):
    """One user's progress on one exercise."""

    exercise_id: str
    exercise_name: str
    target_reps: int
    completed_reps: int


class ParticipantInfo(BaseModel):
    """A participant row with its user."""

    participant_id: str
    user_id: str
    status: ParticipantStatus
    user: Optional[UserSummary] = None


class ParticipantProgress(ParticipantInfo):
    """A participant with per-exercise progress and totals."""

    exercise_progress: list[ExerciseProgressItem]
    total_completed: int
    total_target: int
    completion_percentage: int
    is_completed: bool


class UserChallenge(BaseModel):
    """A challenge the user takes part in, as listed on the dashboard."""

    id: str
    name: str
    date: str
    status: ChallengeStatus
    creator_id: str
    creator: Optional[UserSummary] = None
    exercises: list[ExerciseResponse]
    participant_count: int
    user_status: Optional[ParticipantStatus] = None


class ChallengeDetail(BaseModel):
    """Full challenge view for a participant."""

    id: str
    name: str
    date: str
    status: ChallengeStatus
    creator_id: str
    creator: Optional[UserSummary] = None
    exercises: list[ExerciseResponse]
    participants: list[ParticipantInfo]
    user_status: ParticipantStatus


class TodaysChallenge(BaseModel):
    """Today's challenge with a leaderboard of participants."""

    id: str
    name: str
    date: str
    status: ChallengeStatus
    creator_id: str
    creator: Optional[UserSummary] = None
    exercises: list[ExerciseResponse]
    participants: list[ParticipantProgress]  # leaderboard order
    current_user_id: str


class PendingInvitation(BaseModel):
    """A challenge invitation awaiting an answer."""

    participant_id: str
    challenge_id: str
    challenge_name: str
    date: str
    creator_name: str
    exercise_count: int
    participant_count: int


class PastChallenge(BaseModel):
    """Summary of the user's result on an earlier challenge."""

    challenge_id: str
    name: str
    date: str
    total_exercises: int
    user_completed_reps: int
    user_total_target: int
    completion_percentage: int
    participant_count: int
    is_completed: bool


class DayProgress(BaseModel):
    """Completion state of one calendar day."""

    date: str
    challenge_count: int
    is_completed: bool


class WeeklyProgress(BaseModel):
    """Monday-to-Sunday overview of the current week."""

    days_with_challenges: list[DayProgress]
    completed_challenges_this_week: int

    @property
    def completed_days(self) -> int:
        """Days that had challenges and were fully completed."""
        return sum(1 for d in self.days_with_challenges if d.is_completed and d.challenge_count > 0)

    @property
    def days_with_any_challenges(self) -> int:
        """Days that had at least one challenge."""
        return sum(1 for d in self.days_with_challenges if d.challenge_count > 0)
