"""Notification manager for in-app notifications."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db.models import ChallengeParticipant
from ..db.schemas import NotificationType, ParticipantStatus
from ..db.sqlite import Database, get_db
from ..errors import InvalidInputError, NotFoundError, PermissionDeniedError
from .models import Notification
from .schemas import NotificationCreate, NotificationResponse

logger = logging.getLogger(__name__)


class NotificationManager:
    """Manages notifications and the actions taken from them."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize notification manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    # -------------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------------

    def create_notification(
        self,
        user_id: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        related_id: Optional[str] = None,
        session: Optional[Session] = None,
    ) -> str:
        """Deliver a notification to a user.

        When a session is given the notification is written as part of the
        caller's transaction.

        Returns:
            ID of the new notification
        """
        data = NotificationCreate(
            user_id=user_id, message=message, type=type, related_id=related_id
        )

        def _create(s: Session) -> str:
            notification = Notification(
                user_id=data.user_id,
                message=data.message,
                type=data.type.value,
                related_id=data.related_id,
                is_read=False,
            )
            s.add(notification)
            s.flush()
            logger.debug("Notified %s: %s", data.user_id, data.message)
            return notification.id

        if session:
            return _create(session)
        with self.db.get_session() as s:
            return _create(s)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_notifications(self, user_id: str) -> list[NotificationResponse]:
        """Get a user's notifications, newest first."""
        with self.db.get_session() as session:
            stmt = (
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc())
            )
            notifications = session.execute(stmt).scalars().all()
            return [NotificationResponse.model_validate(n) for n in notifications]

    def get_unread_count(self, user_id: str) -> int:
        """Count unread notifications."""
        with self.db.get_session() as session:
            stmt = select(func.count()).select_from(Notification).where(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            )
            return session.execute(stmt).scalar() or 0

    # -------------------------------------------------------------------------
    # Housekeeping
    # -------------------------------------------------------------------------

    def _owned(self, session: Session, user_id: str, notification_id: str) -> Notification:
        notification = session.get(Notification, notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise PermissionDeniedError("Unauthorized")
        return notification

    def mark_as_read(self, user_id: str, notification_id: str) -> None:
        """Mark one notification as read."""
        with self.db.get_session() as session:
            notification = self._owned(session, user_id, notification_id)
            notification.is_read = True

    def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification as read.

        Returns:
            Number of notifications updated
        """
        with self.db.get_session() as session:
            stmt = select(Notification).where(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            )
            unread = session.execute(stmt).scalars().all()
            for notification in unread:
                notification.is_read = True
            return len(unread)

    def delete_notification(self, user_id: str, notification_id: str) -> None:
        """Delete one notification."""
        with self.db.get_session() as session:
            notification = self._owned(session, user_id, notification_id)
            session.delete(notification)

    def clear_all_notifications(self, user_id: str) -> int:
        """Delete all of a user's notifications.

        Returns:
            Number of notifications deleted
        """
        with self.db.get_session() as session:
            stmt = select(Notification).where(Notification.user_id == user_id)
            notifications = session.execute(stmt).scalars().all()
            for notification in notifications:
                session.delete(notification)
            return len(notifications)

    # -------------------------------------------------------------------------
    # Actions from notifications
    # -------------------------------------------------------------------------

    def _consume(
        self,
        session: Session,
        user_id: str,
        notification_id: str,
        expected: NotificationType,
    ) -> str:
        """Verify and delete an actionable notification, returning its related id."""
        notification = self._owned(session, user_id, notification_id)
        if notification.type != expected.value or not notification.related_id:
            raise InvalidInputError("Invalid notification type")

        related_id = notification.related_id
        session.delete(notification)
        return related_id

    def accept_friend_request_from_notification(self, user_id: str, notification_id: str) -> None:
        """Accept the friend request a notification points at.

        The notification is removed; a request that no longer exists is
        treated as already handled.
        """
        from ..friends.manager import FriendManager
        from ..friends.models import FriendRequest

        with self.db.get_session() as session:
            request_id = self._consume(
                session, user_id, notification_id, NotificationType.FRIEND_REQUEST
            )
            if session.get(FriendRequest, request_id) is None:
                logger.debug("Friend request %s already handled", request_id)
                return
            FriendManager(self.db).accept_friend_request(user_id, request_id, session=session)

    def decline_friend_request_from_notification(self, user_id: str, notification_id: str) -> None:
        """Decline the friend request a notification points at."""
        from ..friends.manager import FriendManager
        from ..friends.models import FriendRequest

        with self.db.get_session() as session:
            request_id = self._consume(
                session, user_id, notification_id, NotificationType.FRIEND_REQUEST
            )
            if session.get(FriendRequest, request_id) is None:
                logger.debug("Friend request %s already handled", request_id)
                return
            FriendManager(self.db).reject_friend_request(user_id, request_id, session=session)

    def accept_challenge_from_notification(self, user_id: str, notification_id: str) -> None:
        """Accept the challenge invitation a notification points at."""
        from ..challenges.manager import ChallengeManager

        with self.db.get_session() as session:
            participant_id = self._consume(
                session, user_id, notification_id, NotificationType.CHALLENGE_INVITATION
            )
            participation = session.get(ChallengeParticipant, participant_id)
            if participation is None:
                return
            if participation.user_id != user_id:
                raise PermissionDeniedError("You are not authorized to accept this invitation")
            if participation.status != ParticipantStatus.INVITED.value:
                return
            ChallengeManager(self.db).accept_invitation(user_id, participant_id, session=session)

    def decline_challenge_from_notification(self, user_id: str, notification_id: str) -> None:
        """Decline the challenge invitation a notification points at."""
        from ..challenges.manager import ChallengeManager

        with self.db.get_session() as session:
            participant_id = self._consume(
                session, user_id, notification_id, NotificationType.CHALLENGE_INVITATION
            )
            participation = session.get(ChallengeParticipant, participant_id)
            if participation is None:
                return
            if participation.user_id != user_id:
                raise PermissionDeniedError("You are not authorized to decline this invitation")
            if participation.status != ParticipantStatus.INVITED.value:
                return
            ChallengeManager(self.db).decline_invitation(user_id, participant_id, session=session)
