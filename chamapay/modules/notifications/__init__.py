"""Notification domain exports"""

from .models import Notification
from .service import NotificationService

__all__ = ["Notification", "NotificationService"]
