"""Activity log model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text, Uuid

from app.database import Base


class ActivityLog(Base):
    """Audit trail of booking and block mutations"""
    __tablename__ = "activity_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Actor information
    actor_id = Column(Uuid)  # User ID or null for system

    # Action details
    action = Column(String(20), nullable=False)  # create, update, delete, confirm
    unit_number = Column(Integer)  # Null for block actions
    details = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
