"""Exercise progress module."""

from .buffer import PendingWrite, ProgressBuffer
from .completion import (
    CompletionTotals,
    clamp_reps,
    completion_percentage,
    completion_totals,
)
from .manager import ProgressManager

__all__ = [
    "PendingWrite",
    "ProgressBuffer",
    "CompletionTotals",
    "clamp_reps",
    "completion_percentage",
    "completion_totals",
    "ProgressManager",
]
