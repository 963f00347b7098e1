"""Streak manager for completion streaks."""

import logging
from typing import Optional

from ..challenges.aggregator import completed_dates
from ..challenges.manager import load_user_snapshots
from ..dates import today_in_timezone
from ..db.sqlite import Database, get_db
from .calculator import calculate_streak
from .schemas import UserStreak

logger = logging.getLogger(__name__)


class StreakManager:
    """Computes completion streaks from stored progress."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize streak manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def get_completed_dates(self, user_id: str) -> set[str]:
        """Days on which the user completed all of that day's challenges."""
        with self.db.get_session() as session:
            return completed_dates(load_user_snapshots(session, user_id), user_id)

    def get_user_streak(
        self,
        user_id: str,
        timezone: Optional[str] = None,
        today: Optional[str] = None,
    ) -> UserStreak:
        """Get the user's current and longest streak.

        Args:
            user_id: User to compute for
            timezone: IANA timezone used to derive today (UTC if omitted)
            today: Explicit ``YYYY-MM-DD`` overriding the timezone

        Returns:
            UserStreak
        """
        today = today or today_in_timezone(timezone)
        dates = self.get_completed_dates(user_id)
        streak = calculate_streak(dates, today)
        logger.debug(
            "Streak for %s on %s: current=%d longest=%d",
            user_id, today, streak.current_streak, streak.longest_streak,
        )
        return streak
