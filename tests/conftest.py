"""Pytest configuration and shared fixtures.

This module provides fixtures for testing repstreak: an in-memory
database, a handful of users and helpers for wiring up friendships and
challenges.
"""

import os
from typing import Generator

import pytest

from repstreak.challenges import ChallengeCreate, ChallengeManager, ExerciseInput
from repstreak.config import reset_config
from repstreak.db.models import User
from repstreak.db.sqlite import Database, reset_db
from repstreak.friends import FriendManager
from repstreak.users import UserManager


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def db() -> Generator[Database, None, None]:
    """Create an in-memory database for testing."""
    reset_db()
    reset_config()

    database = Database(":memory:")
    database.create_tables()
    yield database

    reset_db()
    reset_config()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def users(db: Database) -> dict[str, User]:
    """Create three users keyed by first name."""
    manager = UserManager(db)
    return {
        "alice": manager.store("token-alice", name="Alice Smith", email="alice@example.com"),
        "bob": manager.store("token-bob", name="Bob Jones", email="bob@example.com"),
        "carol": manager.store("token-carol", name="Carol White", email="carol@example.com"),
    }


@pytest.fixture
def alice(users) -> User:
    return users["alice"]


@pytest.fixture
def bob(users) -> User:
    return users["bob"]


@pytest.fixture
def carol(users) -> User:
    return users["carol"]


def befriend(db: Database, user_id: str, other_id: str) -> None:
    """Make two users friends through the request flow."""
    manager = FriendManager(db)
    request_id = manager.send_friend_request(user_id, other_id)
    manager.accept_friend_request(other_id, request_id)


def create_challenge(
    db: Database,
    creator_id: str,
    date: str,
    exercises: list[tuple[str, int]] = (("Push-ups", 10), ("Squats", 20)),
    friend_ids: list[str] = (),
    name: str = "Morning Pump",
):
    """Create a challenge and return its ChallengeCreated."""
    data = ChallengeCreate(
        name=name,
        date=date,
        exercises=[ExerciseInput(name=n, target_reps=r) for n, r in exercises],
        friend_ids=list(friend_ids),
    )
    return ChallengeManager(db).create_challenge(creator_id, data)


@pytest.fixture
def make_friends(db):
    """Return a helper that makes two users friends."""
    return lambda user_id, other_id: befriend(db, user_id, other_id)


@pytest.fixture
def make_challenge(db):
    """Return a helper that creates a challenge for a creator and date."""

    def _make(creator_id, date, **kwargs):
        return create_challenge(db, creator_id, date, **kwargs)

    return _make


@pytest.fixture
def friends(db, alice, bob, carol):
    """Alice is friends with Bob and Carol."""
    befriend(db, alice.id, bob.id)
    befriend(db, alice.id, carol.id)


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_env(tmp_path) -> Generator[str, None, None]:
    """Point the global database at a temporary file for CLI runs."""
    reset_db()
    reset_config()

    db_path = str(tmp_path / "repstreak.db")
    os.environ["REPSTREAK_DB_PATH"] = db_path
    yield db_path

    reset_db()
    reset_config()
    os.environ.pop("REPSTREAK_DB_PATH", None)
    os.environ.pop("REPSTREAK_USER", None)
