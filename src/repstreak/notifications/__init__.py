"""In-app notifications."""

from .manager import NotificationManager
from .models import Notification
from .schemas import NotificationCreate, NotificationResponse

__all__ = [
    "NotificationManager",
    "Notification",
    "NotificationCreate",
    "NotificationResponse",
]
