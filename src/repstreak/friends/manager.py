"""Friend manager for friend requests and friendships."""

import logging
from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from ..db.models import User
from ..db.schemas import NotificationType
from ..db.sqlite import Database, get_db
from ..errors import InvalidStateError, NotFoundError, PermissionDeniedError
from ..notifications.manager import NotificationManager
from ..users.manager import require_user, summarize
from .models import FriendRequest, Friendship
from .schemas import FriendRequestResponse, FriendResponse

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


class FriendManager:
    """Manages friend requests and friendships."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize friend manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()
        self.notifications = NotificationManager(self.db)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def search_users(self, user_id: str, search_term: str) -> list[User]:
        """Search users by name or email.

        Excludes the user, existing friends and anyone with a pending
        request in either direction.

        Args:
            user_id: Acting user
            search_term: Case-insensitive substring

        Returns:
            Up to 10 matching users
        """
        term = search_term.strip()

        with self.db.get_session() as session:
            require_user(session, user_id)

            friend_ids = set(session.execute(
                select(Friendship.friend_id).where(Friendship.user_id == user_id)
            ).scalars())
            sent_ids = set(session.execute(
                select(FriendRequest.recipient_id).where(FriendRequest.requester_id == user_id)
            ).scalars())
            received_ids = set(session.execute(
                select(FriendRequest.requester_id).where(FriendRequest.recipient_id == user_id)
            ).scalars())
            excluded = friend_ids | sent_ids | received_ids | {user_id}

            stmt = (
                select(User)
                .where(
                    or_(User.name.ilike(f"%{term}%"), User.email.ilike(f"%{term}%")),
                    User.id.notin_(excluded),
                )
                .order_by(User.name)
                .limit(SEARCH_LIMIT)
            )
            matches = list(session.execute(stmt).scalars().all())

            for u in matches:
                session.expunge(u)
            return matches

    def get_friends(self, user_id: str) -> list[FriendResponse]:
        """Get accepted friendships of a user."""
        with self.db.get_session() as session:
            stmt = select(Friendship).where(Friendship.user_id == user_id)
            friendships = session.execute(stmt).scalars().all()

            return [
                FriendResponse(
                    friendship_id=f.id,
                    user_id=f.user_id,
                    friend_id=f.friend_id,
                    friend=summarize(f.friend),
                )
                for f in friendships
                if f.friend is not None
            ]

    def get_pending_requests(self, user_id: str) -> list[FriendRequestResponse]:
        """Get incoming friend requests."""
        with self.db.get_session() as session:
            stmt = (
                select(FriendRequest)
                .where(FriendRequest.recipient_id == user_id)
                .order_by(FriendRequest.created_at)
            )
            requests = session.execute(stmt).scalars().all()
            return [self._to_response(r, r.requester) for r in requests if r.requester]

    def get_sent_requests(self, user_id: str) -> list[FriendRequestResponse]:
        """Get outgoing friend requests."""
        with self.db.get_session() as session:
            stmt = (
                select(FriendRequest)
                .where(FriendRequest.requester_id == user_id)
                .order_by(FriendRequest.created_at)
            )
            requests = session.execute(stmt).scalars().all()
            return [self._to_response(r, r.recipient) for r in requests if r.recipient]

    def _to_response(self, request: FriendRequest, other: User) -> FriendRequestResponse:
        return FriendRequestResponse(
            id=request.id,
            requester_id=request.requester_id,
            recipient_id=request.recipient_id,
            created_at=request.created_at,
            other=summarize(other),
        )

    def are_friends(self, user_id: str, other_id: str, session: Optional[Session] = None) -> bool:
        """Check whether a friendship row exists from one user to another."""

        def _check(s: Session) -> bool:
            stmt = select(Friendship.id).where(
                Friendship.user_id == user_id,
                Friendship.friend_id == other_id,
            )
            return s.execute(stmt).first() is not None

        if session:
            return _check(session)
        with self.db.get_session() as s:
            return _check(s)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def send_friend_request(self, user_id: str, friend_id: str) -> str:
        """Send a friend request.

        Returns:
            ID of the new request
        """
        if user_id == friend_id:
            raise InvalidStateError("Cannot send friend request to yourself")

        with self.db.get_session() as session:
            current_user = require_user(session, user_id)
            if session.get(User, friend_id) is None:
                raise NotFoundError("User not found")

            if self.are_friends(user_id, friend_id, session=session):
                raise InvalidStateError("Friendship already exists")

            stmt = select(FriendRequest).where(or_(
                and_(FriendRequest.requester_id == user_id, FriendRequest.recipient_id == friend_id),
                and_(FriendRequest.requester_id == friend_id, FriendRequest.recipient_id == user_id),
            ))
            for existing in session.execute(stmt).scalars():
                if existing.requester_id == user_id:
                    raise InvalidStateError("Friend request already sent")
                raise InvalidStateError("This user has already sent you a friend request")

            request = FriendRequest(requester_id=user_id, recipient_id=friend_id)
            session.add(request)
            session.flush()

            self.notifications.create_notification(
                friend_id,
                f"{current_user.name} sent you a friend request",
                NotificationType.FRIEND_REQUEST,
                related_id=request.id,
                session=session,
            )
            logger.info("Friend request %s -> %s", user_id, friend_id)
            return request.id

    def _incoming(self, session: Session, user_id: str, request_id: str) -> FriendRequest:
        request = session.get(FriendRequest, request_id)
        if request is None:
            raise NotFoundError("Friend request not found")
        if request.recipient_id != user_id:
            raise PermissionDeniedError("Invalid friend request")
        return request

    def accept_friend_request(
        self,
        user_id: str,
        request_id: str,
        session: Optional[Session] = None,
    ) -> None:
        """Accept an incoming request, creating both friendship rows."""

        def _accept(s: Session) -> None:
            current_user = require_user(s, user_id)
            request = self._incoming(s, user_id, request_id)
            requester_id = request.requester_id

            s.delete(request)
            s.add(Friendship(user_id=requester_id, friend_id=user_id))
            s.add(Friendship(user_id=user_id, friend_id=requester_id))

            self.notifications.create_notification(
                requester_id,
                f"{current_user.name} accepted your friend request",
                session=s,
            )
            logger.info("Friendship created between %s and %s", requester_id, user_id)

        if session:
            _accept(session)
            return
        with self.db.get_session() as s:
            _accept(s)

    def reject_friend_request(
        self,
        user_id: str,
        request_id: str,
        session: Optional[Session] = None,
    ) -> None:
        """Reject an incoming request."""

        def _reject(s: Session) -> None:
            s.delete(self._incoming(s, user_id, request_id))

        if session:
            _reject(session)
            return
        with self.db.get_session() as s:
            _reject(s)

    def cancel_friend_request(self, user_id: str, request_id: str) -> None:
        """Cancel a request the user sent."""
        with self.db.get_session() as session:
            request = session.get(FriendRequest, request_id)
            if request is None:
                raise NotFoundError("Friend request not found")
            if request.requester_id != user_id:
                raise PermissionDeniedError("You can only cancel your own friend requests")
            session.delete(request)

    def remove_friend(self, user_id: str, friend_id: str) -> bool:
        """Remove a friendship in both directions.

        Returns:
            True if any friendship row was deleted
        """
        with self.db.get_session() as session:
            stmt = select(Friendship).where(or_(
                and_(Friendship.user_id == user_id, Friendship.friend_id == friend_id),
                and_(Friendship.user_id == friend_id, Friendship.friend_id == user_id),
            ))
            rows = session.execute(stmt).scalars().all()
            for row in rows:
                session.delete(row)
            return bool(rows)
