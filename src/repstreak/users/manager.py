"""User manager for identity storage and lookup."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import User
from ..db.schemas import UserCreate, UserSummary
from ..db.sqlite import Database, get_db
from ..errors import NotAuthenticatedError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_NAME = "No name"


def require_user(session: Session, user_id: str) -> User:
    """Load a user inside an open session or raise NotFoundError."""
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def summarize(user: Optional[User]) -> Optional[UserSummary]:
    """Public summary of a user, None for missing users."""
    if user is None:
        return None
    return UserSummary.model_validate(user)


class UserManager:
    """Manages user identities."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize user manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def store(
        self,
        token_identifier: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """Create a user for a new identity or refresh an existing one.

        Name and email are patched when they changed.

        Args:
            token_identifier: Identity token from the auth provider
            name: Display name
            email: Email address

        Returns:
            The stored user
        """
        data = UserCreate(token_identifier=token_identifier, name=name, email=email)

        with self.db.get_session() as session:
            stmt = select(User).where(User.token_identifier == data.token_identifier)
            user = session.execute(stmt).scalar_one_or_none()

            if user:
                if data.name is not None and user.name != data.name:
                    user.name = data.name
                if data.email is not None and user.email != data.email:
                    user.email = data.email
            else:
                user = User(
                    token_identifier=data.token_identifier,
                    name=data.name or DEFAULT_NAME,
                    email=data.email,
                )
                session.add(user)
                logger.info("Created user %s", data.token_identifier)

            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        with self.db.get_session() as session:
            user = session.get(User, user_id)
            if user:
                session.expunge(user)
            return user

    def get_by_token(self, token_identifier: str) -> Optional[User]:
        """Get a user by identity token."""
        with self.db.get_session() as session:
            stmt = select(User).where(User.token_identifier == token_identifier)
            user = session.execute(stmt).scalar_one_or_none()
            if user:
                session.expunge(user)
            return user

    def get_current_user(self, token_identifier: Optional[str]) -> User:
        """Resolve the acting user from an identity token.

        Raises:
            NotAuthenticatedError: If no token was supplied
            NotFoundError: If no user has this token
        """
        if not token_identifier:
            raise NotAuthenticatedError("Not authenticated")

        user = self.get_by_token(token_identifier)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_user_info(self, user_id: str) -> UserSummary:
        """Public info of a user."""
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return summarize(user)

    def list_users(self) -> list[User]:
        """List all users by name."""
        with self.db.get_session() as session:
            users = session.execute(select(User).order_by(User.name)).scalars().all()
            for user in users:
                session.expunge(user)
            return list(users)
