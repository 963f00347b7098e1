"""Tests for FriendManager."""

import pytest

from repstreak.db.schemas import NotificationType
from repstreak.errors import InvalidStateError, NotFoundError, PermissionDeniedError
from repstreak.friends import FriendManager
from repstreak.notifications import NotificationManager
from repstreak.users import UserManager


@pytest.fixture
def manager(db):
    """Create a FriendManager with test database."""
    return FriendManager(db)


class TestFriendRequests:
    """Tests for sending and answering friend requests."""

    def test_send_request(self, db, manager, alice, bob):
        request_id = manager.send_friend_request(alice.id, bob.id)

        incoming = manager.get_pending_requests(bob.id)
        assert [r.id for r in incoming] == [request_id]
        assert incoming[0].other.name == "Alice Smith"

        sent = manager.get_sent_requests(alice.id)
        assert [r.id for r in sent] == [request_id]
        assert sent[0].other.name == "Bob Jones"

    def test_send_request_notifies_recipient(self, db, manager, alice, bob):
        request_id = manager.send_friend_request(alice.id, bob.id)

        notifications = NotificationManager(db).get_notifications(bob.id)
        assert len(notifications) == 1
        assert notifications[0].type == NotificationType.FRIEND_REQUEST
        assert notifications[0].related_id == request_id
        assert notifications[0].message == "Alice Smith sent you a friend request"

    def test_cannot_befriend_self(self, manager, alice):
        with pytest.raises(InvalidStateError, match="yourself"):
            manager.send_friend_request(alice.id, alice.id)

    def test_unknown_recipient(self, manager, alice):
        with pytest.raises(NotFoundError):
            manager.send_friend_request(alice.id, "missing")

    def test_duplicate_request(self, manager, alice, bob):
        manager.send_friend_request(alice.id, bob.id)

        with pytest.raises(InvalidStateError, match="already sent"):
            manager.send_friend_request(alice.id, bob.id)

    def test_reverse_request(self, manager, alice, bob):
        manager.send_friend_request(alice.id, bob.id)

        with pytest.raises(InvalidStateError, match="already sent you"):
            manager.send_friend_request(bob.id, alice.id)

    def test_already_friends(self, manager, alice, bob, make_friends):
        make_friends(alice.id, bob.id)

        with pytest.raises(InvalidStateError, match="already exists"):
            manager.send_friend_request(bob.id, alice.id)

    def test_accept_creates_symmetric_friendship(self, db, manager, alice, bob):
        request_id = manager.send_friend_request(alice.id, bob.id)

        manager.accept_friend_request(bob.id, request_id)

        assert manager.get_pending_requests(bob.id) == []
        assert [f.friend_id for f in manager.get_friends(alice.id)] == [bob.id]
        assert [f.friend_id for f in manager.get_friends(bob.id)] == [alice.id]
        assert manager.are_friends(alice.id, bob.id)
        assert manager.are_friends(bob.id, alice.id)

        messages = [n.message for n in NotificationManager(db).get_notifications(alice.id)]
        assert messages == ["Bob Jones accepted your friend request"]

    def test_only_recipient_can_accept(self, manager, alice, bob, carol):
        request_id = manager.send_friend_request(alice.id, bob.id)

        with pytest.raises(PermissionDeniedError):
            manager.accept_friend_request(carol.id, request_id)
        with pytest.raises(PermissionDeniedError):
            manager.accept_friend_request(alice.id, request_id)

    def test_accept_missing(self, manager, bob):
        with pytest.raises(NotFoundError):
            manager.accept_friend_request(bob.id, "missing")

    def test_reject(self, manager, alice, bob):
        request_id = manager.send_friend_request(alice.id, bob.id)

        manager.reject_friend_request(bob.id, request_id)

        assert manager.get_pending_requests(bob.id) == []
        assert not manager.are_friends(alice.id, bob.id)

    def test_cancel(self, manager, alice, bob):
        request_id = manager.send_friend_request(alice.id, bob.id)

        with pytest.raises(PermissionDeniedError):
            manager.cancel_friend_request(bob.id, request_id)

        manager.cancel_friend_request(alice.id, request_id)
        assert manager.get_sent_requests(alice.id) == []


class TestFriendships:
    """Tests for friend lists and removal."""

    def test_remove_friend(self, manager, alice, bob, make_friends):
        make_friends(alice.id, bob.id)

        assert manager.remove_friend(bob.id, alice.id) is True

        assert manager.get_friends(alice.id) == []
        assert manager.get_friends(bob.id) == []

    def test_remove_non_friend(self, manager, alice, bob):
        assert manager.remove_friend(alice.id, bob.id) is False


class TestSearchUsers:
    """Tests for user search."""

    def test_search_by_name_and_email(self, manager, alice, bob, carol):
        assert [u.id for u in manager.search_users(alice.id, "BOB")] == [bob.id]
        assert [u.id for u in manager.search_users(alice.id, "carol@")] == [carol.id]

    def test_search_excludes_self(self, manager, alice):
        assert manager.search_users(alice.id, "alice") == []

    def test_search_excludes_friends_and_pending(self, manager, alice, bob, carol, make_friends):
        make_friends(alice.id, bob.id)

        assert [u.id for u in manager.search_users(alice.id, "example.com")] == [carol.id]

        manager.send_friend_request(carol.id, alice.id)
        assert manager.search_users(alice.id, "example.com") == []

    def test_search_limit(self, db, manager, alice):
        users = UserManager(db)
        for i in range(12):
            users.store(f"token-runner-{i}", name=f"Runner {i:02d}")

        results = manager.search_users(alice.id, "runner")
        assert len(results) == 10
        assert [u.name for u in results] == [f"Runner {i:02d}" for i in range(10)]

    def test_search_without_email(self, db, manager, alice):
        dana = UserManager(db).store("token-dana", name="Dana Green")

        assert [u.id for u in manager.search_users(alice.id, "green")] == [dana.id]
        assert manager.search_users(alice.id, "nobody@") == []

    def test_search_unknown_user(self, manager):
        with pytest.raises(NotFoundError):
            manager.search_users("missing", "a")
