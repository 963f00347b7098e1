"""Tests for ChallengeManager."""

import pytest
from pydantic import ValidationError

from repstreak.challenges import ChallengeCreate, ChallengeManager, ExerciseInput
from repstreak.db.schemas import NotificationType, ParticipantStatus
from repstreak.errors import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)
from repstreak.notifications import NotificationManager
from repstreak.progress import ProgressManager

TODAY = "2024-01-10"


@pytest.fixture
def manager(db):
    """Create a ChallengeManager with test database."""
    return ChallengeManager(db)


@pytest.fixture
def notifications(db):
    return NotificationManager(db)


@pytest.fixture
def progress(db):
    return ProgressManager(db)


def invitation_for(manager, user_id, challenge_id):
    return next(
        i for i in manager.get_pending_invitations(user_id) if i.challenge_id == challenge_id
    )


class TestCreateChallenge:
    """Tests for challenge creation."""

    def test_create_challenge(self, manager, alice, make_challenge):
        """Test creating a challenge with exercises."""
        created = make_challenge(alice.id, TODAY, exercises=[("Push-ups", 20), ("Squats", 30)])

        assert len(created.exercise_ids) == 2

        detail = manager.get_challenge(alice.id, created.challenge_id)
        assert detail.name == "Morning Pump"
        assert detail.date == TODAY
        assert detail.status.value == "active"
        assert [e.name for e in detail.exercises] == ["Push-ups", "Squats"]
        assert [e.order for e in detail.exercises] == [0, 1]
        assert detail.user_status == ParticipantStatus.ACTIVE
        assert detail.creator.name == "Alice Smith"

    def test_invited_friends(self, manager, notifications, alice, bob, carol, friends, make_challenge):
        """Test that friends are invited and notified."""
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id, carol.id])

        detail = manager.get_challenge(alice.id, created.challenge_id)
        statuses = {p.user_id: p.status for p in detail.participants}
        assert statuses == {
            alice.id: ParticipantStatus.ACTIVE,
            bob.id: ParticipantStatus.INVITED,
            carol.id: ParticipantStatus.INVITED,
        }

        invitation = invitation_for(manager, bob.id, created.challenge_id)
        invites = [
            n for n in notifications.get_notifications(bob.id)
            if n.type == NotificationType.CHALLENGE_INVITATION
        ]
        assert len(invites) == 1
        assert invites[0].related_id == invitation.participant_id
        assert invites[0].message == (
            'Alice Smith invited you to the challenge "Morning Pump" on 2024-01-10'
        )

    def test_duplicate_friend_ids_invited_once(self, manager, alice, bob, friends, make_challenge):
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id, bob.id])

        detail = manager.get_challenge(alice.id, created.challenge_id)
        assert len(detail.participants) == 2

    def test_non_friend_rejected_atomically(self, manager, alice, bob, make_challenge):
        """Test that a non-friend invitee rolls back the whole creation."""
        with pytest.raises(PermissionDeniedError):
            make_challenge(alice.id, TODAY, friend_ids=[bob.id])

        assert manager.get_user_challenges(alice.id) == []

    def test_unknown_friend(self, manager, alice, make_challenge):
        with pytest.raises(NotFoundError):
            make_challenge(alice.id, TODAY, friend_ids=["missing"])

    def test_requires_exercise(self, alice, make_challenge):
        with pytest.raises(InvalidInputError, match="At least one exercise"):
            make_challenge(alice.id, TODAY, exercises=[])

    def test_rejects_zero_target(self, alice, make_challenge):
        with pytest.raises(InvalidInputError, match="greater than 0"):
            make_challenge(alice.id, TODAY, exercises=[("Push-ups", 0)])

    def test_rejects_blank_exercise_name(self, alice, make_challenge):
        with pytest.raises(InvalidInputError, match="cannot be empty"):
            make_challenge(alice.id, TODAY, exercises=[("   ", 10)])

    def test_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            ChallengeCreate(name="  ", date=TODAY, exercises=[ExerciseInput(name="a", target_reps=1)])

    def test_rejects_bad_date(self):
        with pytest.raises(ValidationError):
            ChallengeCreate(name="x", date="2024-02-30")

    def test_unknown_creator(self, manager):
        data = ChallengeCreate(
            name="x", date=TODAY, exercises=[ExerciseInput(name="a", target_reps=1)]
        )
        with pytest.raises(NotFoundError):
            manager.create_challenge("missing", data)


class TestChallengeQueries:
    """Tests for challenge listings."""

    def test_user_challenges_newest_first(self, manager, alice, make_challenge):
        make_challenge(alice.id, "2024-01-08", name="Old")
        make_challenge(alice.id, "2024-01-12", name="New")
        make_challenge(alice.id, "2024-01-10", name="Mid")

        names = [c.name for c in manager.get_user_challenges(alice.id)]
        assert names == ["New", "Mid", "Old"]

    def test_user_challenges_include_invitations(self, manager, alice, bob, friends, make_challenge):
        make_challenge(alice.id, TODAY, friend_ids=[bob.id])

        challenges = manager.get_user_challenges(bob.id)
        assert len(challenges) == 1
        assert challenges[0].user_status == ParticipantStatus.INVITED
        assert challenges[0].participant_count == 2

    def test_upcoming(self, manager, alice, bob, friends, make_challenge):
        """Test upcoming lists active future challenges, soonest first."""
        make_challenge(alice.id, "2024-01-09", name="Past")
        make_challenge(alice.id, TODAY, name="Today")
        make_challenge(alice.id, "2024-01-14", name="Later")
        make_challenge(alice.id, "2024-01-11", name="Soon")
        make_challenge(alice.id, "2024-01-20", name="Far")
        make_challenge(alice.id, "2024-01-12", name="Invited only", friend_ids=[bob.id])

        upcoming = manager.get_upcoming_challenges(alice.id, today=TODAY)
        assert [c.name for c in upcoming] == ["Soon", "Invited only", "Later"]

        # Bob has not accepted yet
        assert manager.get_upcoming_challenges(bob.id, today=TODAY) == []

    def test_upcoming_limit(self, manager, alice, make_challenge):
        for day in ("2024-01-11", "2024-01-12"):
            make_challenge(alice.id, day)

        assert len(manager.get_upcoming_challenges(alice.id, today=TODAY, limit=1)) == 1

    def test_get_challenge_not_found(self, manager, alice):
        with pytest.raises(NotFoundError):
            manager.get_challenge(alice.id, "missing")

    def test_get_challenge_non_participant(self, manager, alice, bob, make_challenge):
        created = make_challenge(alice.id, TODAY)

        with pytest.raises(PermissionDeniedError):
            manager.get_challenge(bob.id, created.challenge_id)


class TestTodaysChallenges:
    """Tests for today's view with leaderboard."""

    def test_none_when_empty(self, manager, alice, make_challenge):
        make_challenge(alice.id, "2024-01-09")
        assert manager.get_todays_challenges(alice.id, today=TODAY) is None

    def test_leaderboard(self, manager, progress, alice, bob, friends, make_challenge):
        created = make_challenge(
            alice.id, TODAY, exercises=[("Push-ups", 10), ("Squats", 20)], friend_ids=[bob.id]
        )
        manager.accept_invitation(bob.id, invitation_for(manager, bob.id, created.challenge_id).participant_id)

        pushups, squats = created.exercise_ids
        progress.update_exercise_progress(alice.id, pushups, 10)
        progress.update_exercise_progress(bob.id, pushups, 15)
        progress.update_exercise_progress(bob.id, squats, 5)

        todays = manager.get_todays_challenges(bob.id, today=TODAY)

        assert len(todays) == 1
        board = todays[0].participants
        assert [p.user_id for p in board] == [bob.id, alice.id]
        assert board[0].total_completed == 15
        assert board[0].total_target == 30
        assert board[0].completion_percentage == 50
        assert [i.completed_reps for i in board[0].exercise_progress] == [15, 5]
        assert board[1].exercise_progress[1].completed_reps == 0
        assert todays[0].current_user_id == bob.id

    def test_timezone_decides_today(self, manager, alice, make_challenge):
        from repstreak.dates import today_in_timezone

        day = today_in_timezone("Pacific/Kiritimati")
        make_challenge(alice.id, day)

        todays = manager.get_todays_challenges(alice.id, timezone="Pacific/Kiritimati")
        assert todays is not None
        assert todays[0].date == day


class TestInvitations:
    """Tests for accepting and declining invitations."""

    def test_accept(self, manager, notifications, alice, bob, friends, make_challenge):
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id])
        invitation = invitation_for(manager, bob.id, created.challenge_id)

        assert invitation.creator_name == "Alice Smith"
        assert invitation.exercise_count == 2

        manager.accept_invitation(bob.id, invitation.participant_id)

        assert manager.get_pending_invitations(bob.id) == []
        detail = manager.get_challenge(bob.id, created.challenge_id)
        assert detail.user_status == ParticipantStatus.ACTIVE
        messages = [n.message for n in notifications.get_notifications(alice.id)]
        assert 'Bob Jones accepted your invitation to "Morning Pump"' in messages

    def test_accept_twice(self, manager, alice, bob, friends, make_challenge):
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id])
        participant_id = invitation_for(manager, bob.id, created.challenge_id).participant_id
        manager.accept_invitation(bob.id, participant_id)

        with pytest.raises(InvalidStateError, match="already been processed"):
            manager.accept_invitation(bob.id, participant_id)

    def test_accept_someone_elses(self, manager, alice, bob, carol, friends, make_challenge):
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id])
        participant_id = invitation_for(manager, bob.id, created.challenge_id).participant_id

        with pytest.raises(PermissionDeniedError):
            manager.accept_invitation(carol.id, participant_id)

    def test_accept_missing(self, manager, bob):
        with pytest.raises(NotFoundError):
            manager.accept_invitation(bob.id, "missing")

    def test_decline(self, manager, notifications, alice, bob, friends, make_challenge):
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id])
        participant_id = invitation_for(manager, bob.id, created.challenge_id).participant_id

        manager.decline_invitation(bob.id, participant_id)

        assert manager.get_user_challenges(bob.id) == []
        detail = manager.get_challenge(alice.id, created.challenge_id)
        assert len(detail.participants) == 1
        messages = [n.message for n in notifications.get_notifications(alice.id)]
        assert 'Bob Jones declined your invitation to "Morning Pump"' in messages


class TestRemoval:
    """Tests for deleting and leaving challenges."""

    def test_delete(self, manager, notifications, progress, alice, bob, friends, make_challenge):
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id])
        progress.update_exercise_progress(alice.id, created.exercise_ids[0], 5)

        manager.delete_challenge(alice.id, created.challenge_id)

        assert manager.get_user_challenges(alice.id) == []
        assert manager.get_user_challenges(bob.id) == []
        assert progress.get_progress(alice.id, created.exercise_ids[0]) is None
        messages = [n.message for n in notifications.get_notifications(bob.id)]
        assert 'Challenge "Morning Pump" has been cancelled by Alice Smith' in messages

    def test_delete_requires_creator(self, manager, alice, bob, friends, make_challenge):
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id])

        with pytest.raises(PermissionDeniedError):
            manager.delete_challenge(bob.id, created.challenge_id)

    def test_delete_missing(self, manager, alice):
        with pytest.raises(NotFoundError):
            manager.delete_challenge(alice.id, "missing")

    def test_leave(self, manager, notifications, progress, alice, bob, friends, make_challenge):
        created = make_challenge(alice.id, TODAY, friend_ids=[bob.id])
        manager.accept_invitation(bob.id, invitation_for(manager, bob.id, created.challenge_id).participant_id)
        progress.update_exercise_progress(bob.id, created.exercise_ids[0], 5)

        manager.leave_challenge(bob.id, created.challenge_id)

        assert manager.get_user_challenges(bob.id) == []
        assert progress.get_progress(bob.id, created.exercise_ids[0]) is None
        messages = [n.message for n in notifications.get_notifications(alice.id)]
        assert 'Bob Jones left your challenge "Morning Pump"' in messages

    def test_creator_cannot_leave(self, manager, alice, make_challenge):
        created = make_challenge(alice.id, TODAY)

        with pytest.raises(InvalidStateError, match="Delete the challenge instead"):
            manager.leave_challenge(alice.id, created.challenge_id)

    def test_leave_non_participant(self, manager, alice, bob, make_challenge):
        created = make_challenge(alice.id, TODAY)

        with pytest.raises(PermissionDeniedError):
            manager.leave_challenge(bob.id, created.challenge_id)


class TestHistory:
    """Tests for past challenges and weekly progress."""

    def test_past_challenges(self, manager, progress, alice, make_challenge):
        old = make_challenge(alice.id, "2024-01-08", name="Old", exercises=[("Push-ups", 10)])
        make_challenge(alice.id, "2024-01-09", name="Yesterday")
        make_challenge(alice.id, TODAY, name="Today")
        progress.update_exercise_progress(alice.id, old.exercise_ids[0], 12)

        past = manager.get_past_challenges(alice.id, today=TODAY)

        assert [p.name for p in past] == ["Yesterday", "Old"]
        assert past[1].is_completed
        assert past[1].user_completed_reps == 10
        assert past[0].completion_percentage == 0

    def test_weekly_progress(self, manager, progress, alice, make_challenge):
        monday = make_challenge(alice.id, "2024-01-08", exercises=[("Push-ups", 10)])
        make_challenge(alice.id, "2024-01-09", exercises=[("Push-ups", 10)])
        progress.update_exercise_progress(alice.id, monday.exercise_ids[0], 10)

        week = manager.get_weekly_progress(alice.id, today=TODAY)

        assert week.days_with_challenges[0].is_completed
        assert not week.days_with_challenges[1].is_completed
        assert week.completed_challenges_this_week == 1
