"""Pydantic schemas for friendships."""

from typing import Optional

from pydantic import BaseModel

from ..db.schemas import UserSummary


class FriendResponse(BaseModel):
    """An accepted friendship seen from one side."""

    friendship_id: str
    user_id: str
    friend_id: str
    friend: UserSummary


class FriendRequestResponse(BaseModel):
    """A pending friend request with the other party resolved.

    ``other`` is the requester for incoming requests and the recipient for
    sent ones.
    """

    id: str
    requester_id: str
    recipient_id: str
    created_at: str
    other: Optional[UserSummary] = None
