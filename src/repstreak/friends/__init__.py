"""Friend requests and friendships."""

from .manager import FriendManager
from .models import FriendRequest, Friendship
from .schemas import FriendRequestResponse, FriendResponse

__all__ = [
    "FriendManager",
    "FriendRequest",
    "Friendship",
    "FriendRequestResponse",
    "FriendResponse",
]
