"""Seasonal, tiered billing for confirmed bookings"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List

from app.engine.calendar_rules import DateLike, days_between, is_off_season, local_day, normalize_day
from app.engine.types import BillingPolicy, BookingStatus, enum_value


def compute_amount(
    booking_date: DateLike,
    created_at: DateLike,
    attendees_final: int,
    policy: BillingPolicy,
) -> int:
    """
    Amount owed for one confirmed booking.

    Off-season dates are free. In season, bookings made fewer than
    ``policy.short_notice_days`` days ahead pay a flat amount; the rest pay
    per person with a minimum. Notice runs from the day ``created_at`` falls on
    in ``policy.timezone``, the same calendar the booking was made against.
    """
    if is_off_season(booking_date, policy):
        return 0
    if days_between(local_day(created_at, policy.timezone), booking_date) < policy.short_notice_days:
        return policy.short_notice_amount
    return max(policy.minimum_amount, attendees_final * policy.per_person_rate)


@dataclass
class BillingLine:
    date: date
    meal_period: str
    attendees: int
    amount: int
    tables: List[int]
    services: List[str]


@dataclass
class UnitSummary:
    unit_number: int
    total_bookings: int = 0
    total_attendees: int = 0
    total_amount: int = 0
    bookings: List[BillingLine] = field(default_factory=list)


def booking_services(booking) -> List[str]:
    services = []
    if booking.fire_preparation_requested:
        services.append("fire")
    if booking.oven_requested:
        services.append("oven")
    return services


def summarize_by_unit(bookings: Iterable, policy: BillingPolicy) -> List[UnitSummary]:
    """Aggregate confirmed bookings into per-unit totals"""
    summaries: Dict[int, UnitSummary] = {}
    ordered = sorted(bookings, key=lambda b: (b.unit_number, normalize_day(b.date)))
    for booking in ordered:
        if booking.status != BookingStatus.CONFIRMED:
            continue
        attendees = booking.attendees_final or booking.attendees_planned
        amount = compute_amount(booking.date, booking.created_at, attendees, policy)

        summary = summaries.setdefault(booking.unit_number, UnitSummary(booking.unit_number))
        summary.total_bookings += 1
        summary.total_attendees += attendees
        summary.total_amount += amount
        summary.bookings.append(BillingLine(
            date=normalize_day(booking.date),
            meal_period=enum_value(booking.meal_period),
            attendees=attendees,
            amount=amount,
            tables=list(booking.tables),
            services=booking_services(booking),
        ))

    return [summaries[unit] for unit in sorted(summaries)]
