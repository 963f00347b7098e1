"""Daily workout challenges with friends, rep tracking and completion streaks."""

__version__ = "0.1.0"
