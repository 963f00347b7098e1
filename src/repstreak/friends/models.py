"""SQLAlchemy models for friendships.

Tables:
- friend_requests: Pending requests between two users
- friendships: Accepted friendships, stored as two symmetric rows
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db.models import Base, User, generate_uuid, utc_now


class FriendRequest(Base):
    """Friend request model - pending until the recipient answers."""

    __tablename__ = "friend_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    requester_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recipient_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)

    requester: Mapped["User"] = relationship("User", foreign_keys=[requester_id])
    recipient: Mapped["User"] = relationship("User", foreign_keys=[recipient_id])

    def __repr__(self) -> str:
        return f"<FriendRequest(from={self.requester_id}, to={self.recipient_id})>"


class Friendship(Base):
    """Friendship model - one direction of an accepted friendship."""

    __tablename__ = "friendships"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    friend_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)

    friend: Mapped["User"] = relationship("User", foreign_keys=[friend_id])

    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friendship"),
    )

    def __repr__(self) -> str:
        return f"<Friendship(user_id={self.user_id}, friend_id={self.friend_id})>"
