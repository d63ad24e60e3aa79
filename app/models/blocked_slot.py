"""Blocked slot model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Boolean, Date, DateTime, Enum, ForeignKey, Uuid

from app.database import Base
from app.engine.types import BlockMealPeriod, BlockReason


class BlockedSlot(Base):
    """Administrative exclusion of a date's meal periods"""
    __tablename__ = "blocked_slots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False, index=True)
    meal_period = Column(Enum(BlockMealPeriod), nullable=False)
    reason = Column(Enum(BlockReason), nullable=False)
    fire_preparation_prepared = Column(Boolean, default=False, nullable=False)

    created_by = Column(Uuid, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
