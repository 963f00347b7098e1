"""Pydantic schemas for completion streaks."""

from typing import Optional

from pydantic import BaseModel, Field


class UserStreak(BaseModel):
    """Current and longest streak of fully completed days."""

    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_completed_date: Optional[str] = None  # YYYY-MM-DD
