"""Yearly billing export"""

from datetime import date
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.engine.billing import UnitSummary, summarize_by_unit
from app.engine.errors import PermissionDenied, ValidationError
from app.engine.permissions import Capability, Permissions
from app.engine.types import BookingStatus
from app.models.booking import Booking
from app.services.policies import billing_policy

logger = structlog.get_logger()


async def export_billing(db: AsyncSession, permissions: Permissions, year: int) -> List[UnitSummary]:
    """Per-unit amounts for all confirmed bookings dated in the given year"""
    if not permissions.has(Capability.EXPORT_BILLING):
        raise PermissionDenied("You don't have permission to export billing data")
    if not 1 <= year <= 9999:
        raise ValidationError("Invalid year", field="year")

    result = await db.execute(
        select(Booking).where(
            Booking.date >= date(year, 1, 1),
            Booking.date <= date(year, 12, 31),
            Booking.status == BookingStatus.CONFIRMED,
        ).order_by(Booking.unit_number, Booking.date)
    )
    bookings = result.scalars().all()

    summaries = summarize_by_unit(bookings, billing_policy())
    logger.info("Billing exported", year=year, units=len(summaries), bookings=len(bookings))
    return summaries
