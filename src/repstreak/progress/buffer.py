"""Debounced buffer for rep updates.

Rep counters change on every tap; writing each change would hammer the
store. ``ProgressBuffer`` keeps the latest pending value per exercise and
writes it once the exercise has been idle for the configured delay.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import get_config
from ..errors import InvalidInputError
from .manager import ProgressManager

logger = logging.getLogger(__name__)


@dataclass
class PendingWrite:
    """Latest unsaved rep count for one exercise."""

    exercise_id: str
    completed_reps: int
    touched_at: float


class ProgressBuffer:
    """Pending-write queue keyed by exercise id."""

    def __init__(
        self,
        manager: ProgressManager,
        user_id: str,
        delay: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the buffer.

        Args:
            manager: Progress manager used for writes
            user_id: User whose progress is buffered
            delay: Idle seconds before a pending write is due
                   (REPSTREAK_FLUSH_DELAY when omitted)
            clock: Monotonic time source
        """
        self.manager = manager
        self.user_id = user_id
        self.delay = get_config().flush_delay if delay is None else delay
        self.clock = clock
        self._pending: dict[str, PendingWrite] = {}

    @property
    def pending_count(self) -> int:
        """Number of exercises with unsaved changes."""
        return len(self._pending)

    def pending_for(self, exercise_id: str) -> Optional[int]:
        """Unsaved rep count for an exercise, None if nothing is pending."""
        write = self._pending.get(exercise_id)
        return write.completed_reps if write else None

    def record(self, exercise_id: str, completed_reps: int) -> None:
        """Queue an absolute rep count, replacing any pending value."""
        if completed_reps < 0:
            raise InvalidInputError("Completed reps cannot be negative")
        self._pending[exercise_id] = PendingWrite(
            exercise_id=exercise_id,
            completed_reps=completed_reps,
            touched_at=self.clock(),
        )

    def increment(self, exercise_id: str, delta: int, current: int = 0) -> int:
        """Add ``delta`` reps on top of the pending or current count.

        Args:
            exercise_id: Exercise being counted
            delta: Reps to add (negative to undo)
            current: Stored count to start from when nothing is pending

        Returns:
            The new pending count, never below zero
        """
        base = self.pending_for(exercise_id)
        if base is None:
            base = current
        value = max(0, base + delta)
        self.record(exercise_id, value)
        return value

    def due(self) -> list[str]:
        """Exercise ids whose pending write has been idle long enough."""
        now = self.clock()
        return [
            w.exercise_id for w in self._pending.values()
            if now - w.touched_at >= self.delay
        ]

    def flush_due(self) -> int:
        """Write every pending value that is due.

        Returns:
            Number of writes performed
        """
        return self._write(self.due())

    def flush(self) -> int:
        """Write every pending value regardless of age."""
        return self._write(list(self._pending))

    def discard(self, exercise_id: str) -> None:
        """Drop a pending value without writing it."""
        self._pending.pop(exercise_id, None)

    def _write(self, exercise_ids: list[str]) -> int:
        written = 0
        for exercise_id in exercise_ids:
            write = self._pending[exercise_id]
            try:
                self.manager.update_exercise_progress(
                    self.user_id, write.exercise_id, write.completed_reps
                )
            except Exception:
                logger.warning("Failed to save progress for exercise %s", exercise_id)
                raise
            # Failed writes stay pending
            if self._pending.get(exercise_id) is write:
                del self._pending[exercise_id]
            written += 1
        if written:
            logger.debug("Flushed %d progress writes", written)
        return written
