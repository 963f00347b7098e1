"""Exceptions raised by repstreak handlers.

Handlers raise these with a human-readable message; the CLI prints the
message and exits non-zero.
"""


class RepStreakError(Exception):
    """Base exception for repstreak errors."""

    pass


class NotAuthenticatedError(RepStreakError):
    """No acting user identity was supplied."""

    pass


class NotFoundError(RepStreakError):
    """A referenced record does not exist."""

    pass


class PermissionDeniedError(RepStreakError):
    """The acting user may not touch the referenced record."""

    pass


class InvalidStateError(RepStreakError):
    """The record is not in a state that allows the operation."""

    pass


class InvalidInputError(RepStreakError, ValueError):
    """Input failed validation at the write boundary."""

    pass
