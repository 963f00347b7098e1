"""SQLAlchemy models for notifications."""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base, generate_uuid, utc_now
from ..db.schemas import NotificationType


class Notification(Base):
    """Notification model - a message delivered to one user."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    type: Mapped[str] = mapped_column(String(30), default=NotificationType.INFO.value)

    # Friend request or participant id the notification acts on
    related_id: Mapped[Optional[str]] = mapped_column(String(36))

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)

    __table_args__ = (Index("ix_notifications_user_read", "user_id", "is_read"),)

    def __repr__(self) -> str:
        return f"<Notification(user_id={self.user_id}, type={self.type}, read={self.is_read})>"
