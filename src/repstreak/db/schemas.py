"""Pydantic schemas and enums shared across repstreak.

Feature packages define their own request/response schemas; this module
holds the status vocabularies stored in the database and the user schemas.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ChallengeStatus(str, Enum):
    """Lifecycle status of a challenge."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ParticipantStatus(str, Enum):
    """Membership status of a user in a challenge."""

    INVITED = "invited"
    ACTIVE = "active"
    COMPLETED = "completed"  # Never set automatically


class NotificationType(str, Enum):
    """Kind of notification delivered to a user."""

    FRIEND_REQUEST = "friend_request"
    CHALLENGE_INVITATION = "challenge_invitation"
    INFO = "info"


# ============================================================================
# User Schemas
# ============================================================================


class UserCreate(BaseModel):
    """Schema for storing a user identity."""

    token_identifier: str = Field(..., min_length=1, max_length=255)
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=320)

    @field_validator("token_identifier")
    @classmethod
    def strip_token(cls, v: str) -> str:
        """Reject whitespace-only tokens."""
        v = v.strip()
        if not v:
            raise ValueError("token_identifier cannot be blank")
        return v


class UserSummary(BaseModel):
    """Public view of a user."""

    id: str
    name: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}
