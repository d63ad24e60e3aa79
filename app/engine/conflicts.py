"""Detection of competing table and oven claims within a slot"""

from typing import Iterable, Sequence

from app.engine.errors import TableConflict, OvenConflict
from app.engine.types import ACTIVE_STATUSES


def check_conflict(
    slot_bookings: Iterable,
    candidate_tables: Sequence[int],
    candidate_oven: bool,
    exclude_booking_id=None,
) -> None:
    """
    Raise TableConflict or OvenConflict if an active booking in the slot
    already holds a requested resource.

    ``slot_bookings`` must contain the bookings for exactly one
    (date, meal period) pair; inactive bookings and ``exclude_booking_id``
    are ignored.
    """
    held_tables = set()
    oven_held = False
    for booking in slot_bookings:
        if exclude_booking_id is not None and booking.id == exclude_booking_id:
            continue
        if booking.status not in ACTIVE_STATUSES:
            continue
        held_tables.update(booking.tables)
        oven_held = oven_held or bool(booking.oven_requested)

    overlap = held_tables.intersection(candidate_tables)
    if overlap:
        raise TableConflict(overlap)
    if candidate_oven and oven_held:
        raise OvenConflict()
