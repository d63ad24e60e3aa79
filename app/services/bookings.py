"""Booking create/update/confirm/cancel against the database"""

from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.engine import lifecycle
from app.engine.blocking import check_slot_blocked
from app.engine.calendar_rules import normalize_day
from app.engine.conflicts import check_conflict
from app.engine.eligibility import resolve_eligibility
from app.engine.errors import ConflictError, NotFound
from app.engine.permissions import Capability, Permissions
from app.engine.types import ACTIVE_STATUSES, BookingStatus, MealPeriod
from app.models.blocked_slot import BlockedSlot
from app.models.booking import Booking, BookingTable
from app.schemas.booking import BookingCreate, BookingUpdate
from app.services.activity import describe_services, describe_slot, record_activity
from app.services.notifications import CONCIERGE_SERVICE_NEEDED, Notifier, dispatch
from app.services.policies import eligibility_policy, resource_pool

logger = structlog.get_logger()


def oven_slot_key(booking_date: date, meal_period: MealPeriod) -> str:
    return f"{booking_date.isoformat()}:{MealPeriod(meal_period).value}"


async def load_slot_bookings(db: AsyncSession, booking_date: date, meal_period: MealPeriod) -> List[Booking]:
    """Active bookings for one (date, meal period) slot"""
    result = await db.execute(
        select(Booking).where(
            Booking.date == normalize_day(booking_date),
            Booking.meal_period == meal_period,
            Booking.status.in_(ACTIVE_STATUSES),
        ).execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def load_blocks(db: AsyncSession, block_date: date) -> List[BlockedSlot]:
    result = await db.execute(
        select(BlockedSlot).where(BlockedSlot.date == normalize_day(block_date))
    )
    return list(result.scalars().all())


async def ensure_slot_available(
    db: AsyncSession,
    booking_date: date,
    meal_period: MealPeriod,
    tables: Sequence[int],
    oven: bool,
    exclude_booking_id: Optional[UUID] = None,
    enforce_blocks: Optional[bool] = None,
) -> None:
    """Raise a ConflictError if the slot cannot take the requested resources"""
    if enforce_blocks is None:
        enforce_blocks = settings.enforce_blocked_slots
    if enforce_blocks:
        check_slot_blocked(await load_blocks(db, booking_date), meal_period)

    slot_bookings = await load_slot_bookings(db, booking_date, meal_period)
    check_conflict(slot_bookings, tables, oven, exclude_booking_id=exclude_booking_id)


async def get_booking(db: AsyncSession, booking_id: UUID) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFound("Booking not found", booking_id=str(booking_id))
    return booking


async def list_bookings(
    db: AsyncSession,
    permissions: Permissions,
    booking_date: Optional[date] = None,
    meal_period: Optional[MealPeriod] = None,
    unit_number: Optional[int] = None,
) -> List[Booking]:
    """Bookings visible to the actor, ordered by date, meal period and unit"""
    query = select(Booking)
    if booking_date is not None:
        query = query.where(Booking.date == normalize_day(booking_date))
    if meal_period is not None:
        query = query.where(Booking.meal_period == meal_period)

    if not permissions.has(Capability.VIEW_ALL):
        query = query.where(Booking.unit_number == permissions.unit_number)
    elif unit_number is not None:
        query = query.where(Booking.unit_number == unit_number)

    query = query.order_by(Booking.date, Booking.meal_period, Booking.unit_number)
    result = await db.execute(query)
    return list(result.scalars().all())


def _sync_table_claims(booking: Booking, tables: Sequence[int]) -> None:
    """Point the booking's table rows at its slot, keeping rows for retained tables"""
    wanted = set(tables)
    claims = []
    for claim in booking.table_claims:
        if claim.table_number in wanted:
            claim.date = booking.date
            claim.meal_period = booking.meal_period
            claims.append(claim)
    held = {claim.table_number for claim in claims}
    for table in sorted(wanted - held):
        claims.append(BookingTable(table_number=table, date=booking.date, meal_period=booking.meal_period))
    booking.table_claims = claims
    booking.oven_slot = oven_slot_key(booking.date, booking.meal_period) if booking.oven_requested else None


async def _commit_allocation(
    db: AsyncSession,
    booking_date: date,
    meal_period: MealPeriod,
    tables: Sequence[int],
    oven: bool,
    booking_id: Optional[UUID] = None,
) -> None:
    """
    Commit a booking write, translating storage uniqueness violations into
    the same conflicts the detector reports.
    """
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(
            "Allocation rejected by storage constraint",
            date=booking_date.isoformat(),
            meal_period=meal_period.value,
            tables=list(tables),
        )
        slot_bookings = await load_slot_bookings(db, booking_date, meal_period)
        check_conflict(slot_bookings, tables, oven, exclude_booking_id=booking_id)
        raise


async def create_booking(
    db: AsyncSession,
    permissions: Permissions,
    draft: BookingCreate,
    as_of: date,
    notifier: Notifier,
) -> Booking:
    """Create a pending booking after conflict detection and eligibility resolution"""
    pool = resource_pool()
    unit_number, meal_period, tables, attendees = lifecycle.validate_draft(
        draft.unit_number, draft.meal_period, draft.tables, draft.attendees_planned, pool
    )
    lifecycle.ensure_can_create(permissions, unit_number)
    booking_date = normalize_day(draft.date)

    try:
        await ensure_slot_available(db, booking_date, meal_period, tables, draft.oven_requested)
    except ConflictError as e:
        logger.warning("Booking conflict", kind=e.kind, unit_number=unit_number, **e.details)
        raise

    eligibility = resolve_eligibility(
        booking_date,
        draft.fire_preparation_requested,
        as_of,
        eligibility_policy(),
        requested_cleaning_waiver=draft.cleaning_service_waived,
    )

    booking = Booking(
        unit_number=unit_number,
        user_id=permissions.actor_id,
        date=booking_date,
        meal_period=meal_period,
        oven_requested=bool(draft.oven_requested),
        attendees_planned=attendees,
        status=BookingStatus.PENDING,
        cleaning_service_waived=eligibility.cleaning_service_waived,
        cleaning_waiver_requested=bool(draft.cleaning_service_waived),
        fire_preparation_asked=bool(draft.fire_preparation_requested),
        fire_preparation_requested=eligibility.fire_preparation_allowed,
        notes=draft.notes,
    )
    _sync_table_claims(booking, tables)
    db.add(booking)
    await _commit_allocation(db, booking_date, meal_period, tables, booking.oven_requested)

    logger.info(
        "Booking created",
        booking_id=str(booking.id),
        unit_number=unit_number,
        date=booking_date.isoformat(),
        meal_period=meal_period.value,
        tables=tables,
    )

    await record_activity(
        db,
        "create",
        f"Unit #{unit_number} booked {describe_slot(booking_date, meal_period, tables)}"
        + describe_services(
            eligibility.fire_preparation_allowed,
            booking.oven_requested,
            eligibility.cleaning_service_waived,
            eligibility.rest_day,
        ),
        actor_id=permissions.actor_id,
        unit_number=unit_number,
    )

    if eligibility.fire_preparation_allowed:
        dispatch(notifier, CONCIERGE_SERVICE_NEEDED, _concierge_payload(booking))

    return booking


async def update_booking(
    db: AsyncSession,
    permissions: Permissions,
    booking_id: UUID,
    patch: BookingUpdate,
    as_of: date,
    notifier: Notifier,
) -> Booking:
    """Apply a patch, re-running conflict detection and eligibility for the new slot"""
    pool = resource_pool()
    booking = await get_booking(db, booking_id)
    lifecycle.ensure_can_mutate(permissions, booking, as_of, "update")

    fields = patch.model_dump(exclude_unset=True)

    unit_number = _patched(fields, "unit_number", booking.unit_number)
    if unit_number != booking.unit_number:
        lifecycle.validate_unit(unit_number, pool)
        lifecycle.ensure_can_move_to_unit(permissions, unit_number)

    booking_date = normalize_day(_patched(fields, "date", booking.date))
    meal_period = lifecycle.parse_meal_period(_patched(fields, "meal_period", booking.meal_period))
    tables = lifecycle.validate_tables(
        _patched(fields, "tables", booking.tables), pool
    )
    attendees = lifecycle.validate_attendees(
        _patched(fields, "attendees_planned", booking.attendees_planned), "attendees_planned"
    )
    oven = bool(_patched(fields, "oven_requested", booking.oven_requested))
    requested_fire = bool(_patched(fields, "fire_preparation_requested", booking.fire_preparation_asked))
    waiver_requested = bool(_patched(fields, "cleaning_service_waived", booking.cleaning_waiver_requested))

    try:
        await ensure_slot_available(db, booking_date, meal_period, tables, oven, exclude_booking_id=booking.id)
    except ConflictError as e:
        logger.warning("Booking conflict", kind=e.kind, booking_id=str(booking.id), **e.details)
        raise

    eligibility = resolve_eligibility(
        booking_date, requested_fire, as_of, eligibility_policy(), requested_cleaning_waiver=waiver_requested
    )

    slot_changed = (booking_date, meal_period) != (booking.date, MealPeriod(booking.meal_period))
    fire_newly_allowed = eligibility.fire_preparation_allowed and (
        slot_changed or not booking.fire_preparation_requested
    )

    booking.unit_number = unit_number
    booking.date = booking_date
    booking.meal_period = meal_period
    booking.oven_requested = oven
    booking.attendees_planned = attendees
    booking.cleaning_service_waived = eligibility.cleaning_service_waived
    booking.cleaning_waiver_requested = waiver_requested
    booking.fire_preparation_asked = requested_fire
    booking.fire_preparation_requested = eligibility.fire_preparation_allowed
    if "notes" in fields:
        booking.notes = fields["notes"]
    _sync_table_claims(booking, tables)

    await _commit_allocation(db, booking_date, meal_period, tables, oven, booking_id=booking.id)

    logger.info("Booking updated", booking_id=str(booking.id), unit_number=unit_number)

    await record_activity(
        db,
        "update",
        f"Unit #{unit_number} modified booking to {describe_slot(booking_date, meal_period, tables)}"
        + describe_services(
            eligibility.fire_preparation_allowed,
            oven,
            eligibility.cleaning_service_waived,
            eligibility.rest_day,
        ),
        actor_id=permissions.actor_id,
        unit_number=unit_number,
    )

    if fire_newly_allowed:
        dispatch(notifier, CONCIERGE_SERVICE_NEEDED, _concierge_payload(booking))

    return booking


async def confirm_booking(
    db: AsyncSession,
    permissions: Permissions,
    booking_id: UUID,
    attendees_final: Optional[int] = None,
    notes: Optional[str] = None,
) -> Booking:
    """Confirm a pending booking with its final attendee count"""
    booking = await get_booking(db, booking_id)
    lifecycle.ensure_can_confirm(permissions, booking)
    lifecycle.confirm(booking, resource_pool(), attendees_final=attendees_final, notes=notes)
    await db.commit()

    logger.info(
        "Booking confirmed",
        booking_id=str(booking.id),
        attendees_final=booking.attendees_final,
    )

    await record_activity(
        db,
        "confirm",
        f"Unit #{booking.unit_number} confirmed booking of "
        f"{describe_slot(booking.date, booking.meal_period, booking.tables)}"
        + describe_services(booking.fire_preparation_requested, booking.oven_requested)
        + f", {booking.attendees_final} final attendees",
        actor_id=permissions.actor_id,
        unit_number=booking.unit_number,
    )
    return booking


async def cancel_booking(
    db: AsyncSession,
    permissions: Permissions,
    booking_id: UUID,
    as_of: date,
) -> None:
    """Cancel by hard delete; the activity log keeps the only record"""
    booking = await get_booking(db, booking_id)
    lifecycle.ensure_can_mutate(permissions, booking, as_of, "cancel")

    summary = (
        f"Unit #{booking.unit_number} cancelled booking of "
        f"{describe_slot(booking.date, booking.meal_period, booking.tables)}"
        + describe_services(booking.fire_preparation_requested, booking.oven_requested)
    )
    unit_number = booking.unit_number

    await db.delete(booking)
    await db.commit()

    logger.info("Booking cancelled", booking_id=str(booking_id), unit_number=unit_number)

    await record_activity(db, "delete", summary, actor_id=permissions.actor_id, unit_number=unit_number)


def _patched(fields: dict, name: str, current):
    """Patched value, or the current one when the patch leaves it out or nulls it"""
    value = fields.get(name)
    return current if value is None else value


def _concierge_payload(booking: Booking) -> dict:
    return {
        "booking_id": str(booking.id),
        "unit_number": booking.unit_number,
        "date": booking.date.isoformat(),
        "meal_period": MealPeriod(booking.meal_period).value,
        "tables": booking.tables,
        "fire_preparation": bool(booking.fire_preparation_requested),
        "oven": bool(booking.oven_requested),
    }
