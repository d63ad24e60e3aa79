"""Booking API endpoints"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.engine.blocking import find_covering_block
from app.engine.lifecycle import ensure_can_view
from app.engine.permissions import Permissions
from app.engine.types import MealPeriod
from app.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    BookingConfirm,
    BookingResponse,
    AvailabilityResponse,
    BlockSummary,
)
from app.services import bookings as booking_service
from app.services.notifications import Notifier, get_notifier
from app.services.policies import resource_pool
from app.api.auth import get_permissions

router = APIRouter()


def get_today() -> date:
    """Current calendar date in the community's timezone"""
    return datetime.now(ZoneInfo(settings.timezone)).date()


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    booking_date: Optional[date] = Query(None, alias="date"),
    meal_period: Optional[MealPeriod] = None,
    unit: Optional[int] = None,
    permissions: Permissions = Depends(get_permissions),
    db: AsyncSession = Depends(get_db),
):
    """List bookings; residents only see their own unit"""
    return await booking_service.list_bookings(
        db, permissions, booking_date=booking_date, meal_period=meal_period, unit_number=unit
    )


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    booking_date: date = Query(..., alias="date"),
    meal_period: MealPeriod = Query(...),
    permissions: Permissions = Depends(get_permissions),
    db: AsyncSession = Depends(get_db),
):
    """Held tables, oven state and any block for a slot"""
    slot_bookings = await booking_service.load_slot_bookings(db, booking_date, meal_period)
    booked = sorted({table for booking in slot_bookings for table in booking.tables})
    block = find_covering_block(await booking_service.load_blocks(db, booking_date), meal_period)

    return AvailabilityResponse(
        date=booking_date,
        meal_period=meal_period,
        booked_tables=booked,
        free_tables=[t for t in resource_pool().tables if t not in booked],
        oven_available=not any(booking.oven_requested for booking in slot_bookings),
        blocked=BlockSummary(
            id=block.id,
            reason=block.reason,
            meal_period=block.meal_period.value,
        ) if block else None,
    )


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    booking_data: BookingCreate,
    permissions: Permissions = Depends(get_permissions),
    today: date = Depends(get_today),
    notifier: Notifier = Depends(get_notifier),
    db: AsyncSession = Depends(get_db),
):
    """Create a new booking"""
    return await booking_service.create_booking(db, permissions, booking_data, today, notifier)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    permissions: Permissions = Depends(get_permissions),
    db: AsyncSession = Depends(get_db),
):
    """Get booking details"""
    booking = await booking_service.get_booking(db, booking_id)
    ensure_can_view(permissions, booking)
    return booking


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: UUID,
    booking_data: BookingUpdate,
    permissions: Permissions = Depends(get_permissions),
    today: date = Depends(get_today),
    notifier: Notifier = Depends(get_notifier),
    db: AsyncSession = Depends(get_db),
):
    """Update booking"""
    return await booking_service.update_booking(db, permissions, booking_id, booking_data, today, notifier)


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(
    booking_id: UUID,
    confirmation: BookingConfirm,
    permissions: Permissions = Depends(get_permissions),
    db: AsyncSession = Depends(get_db),
):
    """Confirm a pending booking with the final attendee count"""
    return await booking_service.confirm_booking(
        db,
        permissions,
        booking_id,
        attendees_final=confirmation.attendees_final,
        notes=confirmation.notes,
    )


@router.delete("/{booking_id}", status_code=204)
async def cancel_booking(
    booking_id: UUID,
    permissions: Permissions = Depends(get_permissions),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking"""
    await booking_service.cancel_booking(db, permissions, booking_id, today)
