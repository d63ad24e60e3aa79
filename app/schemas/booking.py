"""Booking schemas"""

from datetime import date, datetime
from typing import Annotated, Optional, List
from uuid import UUID
from pydantic import BaseModel, BeforeValidator

from app.engine.calendar_rules import normalize_day
from app.engine.types import MealPeriod, BookingStatus, BlockReason


def to_day(value):
    """Accept dates or datetimes (any time of day) and keep only the day"""
    if isinstance(value, str) and "T" in value:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        return normalize_day(value)
    return value


Day = Annotated[date, BeforeValidator(to_day)]


class BookingCreate(BaseModel):
    """Create booking request"""
    unit_number: int
    date: Day
    meal_period: MealPeriod
    tables: List[int]
    attendees_planned: Optional[int] = None
    oven_requested: bool = False
    fire_preparation_requested: bool = False
    cleaning_service_waived: bool = False
    notes: Optional[str] = None


class BookingUpdate(BaseModel):
    """Update booking request"""
    unit_number: Optional[int] = None
    date: Optional[Day] = None
    meal_period: Optional[MealPeriod] = None
    tables: Optional[List[int]] = None
    attendees_planned: Optional[int] = None
    oven_requested: Optional[bool] = None
    fire_preparation_requested: Optional[bool] = None
    cleaning_service_waived: Optional[bool] = None
    notes: Optional[str] = None


class BookingConfirm(BaseModel):
    """Confirm booking request"""
    attendees_final: Optional[int] = None
    notes: Optional[str] = None


class BookingResponse(BaseModel):
    """Booking response"""
    id: UUID
    unit_number: int
    date: Day
    meal_period: MealPeriod
    tables: List[int]
    oven_requested: bool
    attendees_planned: int
    attendees_final: Optional[int]
    status: BookingStatus
    cleaning_service_waived: bool
    fire_preparation_requested: bool
    notes: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class BlockSummary(BaseModel):
    """Block covering a slot"""
    id: UUID
    reason: BlockReason
    meal_period: str


class AvailabilityResponse(BaseModel):
    """Held resources for a slot"""
    date: Day
    meal_period: MealPeriod
    booked_tables: List[int]
    free_tables: List[int]
    oven_available: bool
    blocked: Optional[BlockSummary] = None
