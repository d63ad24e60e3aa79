"""Billing export schemas"""

from typing import List
from pydantic import BaseModel

from app.schemas.booking import Day


class BillingLineResponse(BaseModel):
    """One confirmed booking in the export"""
    date: Day
    meal_period: str
    attendees: int
    amount: int
    tables: List[int]
    services: List[str]

    class Config:
        from_attributes = True


class UnitSummaryResponse(BaseModel):
    """Yearly totals for one unit"""
    unit_number: int
    total_bookings: int
    total_attendees: int
    total_amount: int
    bookings: List[BillingLineResponse]

    class Config:
        from_attributes = True
