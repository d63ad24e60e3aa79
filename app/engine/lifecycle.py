"""Booking state transitions and the guards around them"""

from datetime import date
from typing import Iterable, List, Optional, Tuple

from app.engine.calendar_rules import is_past
from app.engine.errors import (
    AlreadyConfirmed,
    AttendeeCapExceeded,
    InvalidTransition,
    PermissionDenied,
    ValidationError,
)
from app.engine.permissions import Capability, Permissions
from app.engine.types import BookingStatus, MealPeriod, ResourcePool, enum_value

TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: set(),
    BookingStatus.CANCELLED: set(),
}


def ensure_transition(current, target) -> None:
    current, target = BookingStatus(current), BookingStatus(target)
    if current == BookingStatus.CONFIRMED and target == BookingStatus.CONFIRMED:
        raise AlreadyConfirmed()
    if target not in TRANSITIONS[current]:
        raise InvalidTransition(current.value, target.value)


def parse_meal_period(value) -> MealPeriod:
    try:
        return MealPeriod(enum_value(value))
    except ValueError:
        raise ValidationError(f"Unknown meal period: {value}", field="meal_period")


def validate_tables(tables: Optional[Iterable[int]], pool: ResourcePool) -> List[int]:
    tables = list(tables or [])
    if not tables:
        raise ValidationError("At least one table must be selected", field="tables")
    if len(set(tables)) != len(tables):
        raise ValidationError("Selected tables must not be duplicated", field="tables")
    for table in tables:
        if table not in pool.tables:
            raise ValidationError(
                f"Tables must be between 1 and {pool.table_count}", field="tables"
            )
    return sorted(tables)


def validate_unit(unit_number: int, pool: ResourcePool) -> int:
    if unit_number is None or not 1 <= unit_number <= pool.unit_count:
        raise ValidationError(
            f"Unit number must be between 1 and {pool.unit_count}", field="unit_number"
        )
    return unit_number


def validate_attendees(attendees: Optional[int], field: str) -> int:
    if attendees is None or attendees < 1:
        raise ValidationError("Number of attendees must be at least 1", field=field)
    return attendees


def validate_draft(
    unit_number: int,
    meal_period,
    tables: Iterable[int],
    attendees_planned: Optional[int],
    pool: ResourcePool,
) -> Tuple[int, MealPeriod, List[int], int]:
    """Check a booking draft's fields before any conflict detection"""
    return (
        validate_unit(unit_number, pool),
        parse_meal_period(meal_period),
        validate_tables(tables, pool),
        validate_attendees(1 if attendees_planned is None else attendees_planned, "attendees_planned"),
    )


def ensure_can_create(permissions: Permissions, unit_number: int) -> None:
    if permissions.is_privileged:
        return
    if permissions.is_read_only:
        raise PermissionDenied("You don't have permission to create bookings")
    if not permissions.owns(unit_number):
        raise PermissionDenied(
            "You can only create bookings for your own unit", unit_number=unit_number
        )


def ensure_can_view(permissions: Permissions, booking) -> None:
    if not permissions.can_view(booking.unit_number):
        raise PermissionDenied("Access denied", unit_number=booking.unit_number)


def ensure_can_mutate(permissions: Permissions, booking, as_of: date, action: str = "update") -> None:
    """Shared guard for update and cancel"""
    if permissions.is_privileged:
        return
    if not permissions.owns(booking.unit_number):
        raise PermissionDenied(
            f"You do not have permission to {action} this booking",
            unit_number=booking.unit_number,
        )
    if booking.status == BookingStatus.CONFIRMED and is_past(booking.date, as_of):
        raise PermissionDenied(
            f"Confirmed past bookings cannot be {action}d by residents",
            unit_number=booking.unit_number,
        )


def ensure_can_confirm(permissions: Permissions, booking) -> None:
    if permissions.is_privileged or permissions.owns(booking.unit_number):
        return
    raise PermissionDenied(
        "You do not have permission to confirm this booking",
        unit_number=booking.unit_number,
    )


def ensure_can_move_to_unit(permissions: Permissions, unit_number: int) -> None:
    if not permissions.has(Capability.MUTATE_ANY) and not permissions.owns(unit_number):
        raise PermissionDenied(
            "Residents cannot move a booking to another unit", unit_number=unit_number
        )


def confirm(booking, pool: ResourcePool, attendees_final: Optional[int] = None, notes: Optional[str] = None):
    """Move a pending booking to confirmed with its final attendee count"""
    ensure_transition(booking.status, BookingStatus.CONFIRMED)

    attendees = booking.attendees_planned if attendees_final is None else attendees_final
    validate_attendees(attendees, "attendees_final")
    cap = pool.attendee_cap(len(booking.tables))
    if attendees > cap:
        raise AttendeeCapExceeded(attendees, cap)

    booking.status = BookingStatus.CONFIRMED
    booking.attendees_final = attendees
    if notes is not None:
        booking.notes = notes
    return booking
