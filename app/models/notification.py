"""Notification log model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Uuid

from app.database import Base


class NotificationLog(Base):
    """Notifications delivered to the concierge"""
    __tablename__ = "notification_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    tag = Column(String(100))
    sent_at = Column(DateTime, default=datetime.utcnow, index=True)
