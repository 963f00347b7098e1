"""User identity module."""

from .manager import UserManager, require_user, summarize

__all__ = [
    "UserManager",
    "require_user",
    "summarize",
]
