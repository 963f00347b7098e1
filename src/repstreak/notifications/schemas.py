"""Pydantic schemas for notifications."""

from typing import Optional

from pydantic import BaseModel, Field

from ..db.schemas import NotificationType


class NotificationCreate(BaseModel):
    """Schema for creating a notification."""

    user_id: str
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    related_id: Optional[str] = None


class NotificationResponse(BaseModel):
    """Schema for notification responses."""

    id: str
    message: str
    is_read: bool
    created_at: str
    type: NotificationType
    related_id: Optional[str] = None

    model_config = {"from_attributes": True}
