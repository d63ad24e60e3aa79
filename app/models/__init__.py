"""Database models"""

from app.models.user import User, UserRole
from app.models.booking import Booking, BookingTable
from app.models.blocked_slot import BlockedSlot
from app.models.audit import ActivityLog
from app.models.notification import NotificationLog

__all__ = [
    "User",
    "UserRole",
    "Booking",
    "BookingTable",
    "BlockedSlot",
    "ActivityLog",
    "NotificationLog",
]
