"""Blocked slot schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel

from app.engine.types import BlockMealPeriod, BlockReason
from app.schemas.booking import Day


class BlockedSlotCreate(BaseModel):
    """Create block request"""
    date: Day
    meal_period: BlockMealPeriod
    reason: BlockReason
    fire_preparation_prepared: bool = False


class BlockedSlotResponse(BaseModel):
    """Blocked slot response"""
    id: UUID
    date: Day
    meal_period: BlockMealPeriod
    reason: BlockReason
    fire_preparation_prepared: bool
    created_by: Optional[UUID]
    created_at: datetime

    class Config:
        from_attributes = True
