"""Tests for the billing calculator"""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from app.engine.billing import compute_amount, summarize_by_unit
from app.engine.types import BillingPolicy, BookingStatus, MealPeriod

POLICY = BillingPolicy()


@pytest.mark.parametrize(
    "booking_date,created_at,attendees,expected",
    [
        # Off-season is free whatever the attendance
        (date(2025, 7, 15), datetime(2025, 6, 1), 40, 0),
        (date(2025, 5, 1), datetime(2025, 4, 30), 3, 0),
        (date(2025, 11, 30), datetime(2025, 11, 1), 12, 0),
        # In season, short notice pays the flat amount
        (date(2025, 2, 1), datetime(2025, 1, 29, 18, 30), 10, 30),
        (date(2025, 2, 1), datetime(2025, 1, 28), 40, 30),
        # In season, standard tier
        (date(2025, 2, 1), datetime(2025, 1, 12), 3, 30),
        (date(2025, 2, 1), datetime(2025, 1, 12), 10, 70),
        (date(2025, 2, 1), datetime(2025, 1, 27), 5, 35),
        (date(2025, 12, 20), datetime(2025, 11, 1), 4, 30),
    ],
)
def test_compute_amount(booking_date, created_at, attendees, expected):
    assert compute_amount(booking_date, created_at, attendees, POLICY) == expected


def test_custom_pricing():
    policy = BillingPolicy(per_person_rate=10, minimum_amount=50, short_notice_amount=45)
    assert compute_amount(date(2025, 3, 1), datetime(2025, 1, 1), 4, policy) == 50
    assert compute_amount(date(2025, 3, 1), datetime(2025, 1, 1), 8, policy) == 80
    assert compute_amount(date(2025, 3, 1), datetime(2025, 2, 27), 8, policy) == 45


def make_booking(unit, booking_date, attendees_final, status=BookingStatus.CONFIRMED, fire=False, oven=False):
    return SimpleNamespace(
        unit_number=unit,
        date=booking_date,
        meal_period=MealPeriod.EVENING,
        created_at=datetime(2024, 12, 1),
        attendees_planned=4,
        attendees_final=attendees_final,
        status=status,
        tables=[1],
        fire_preparation_requested=fire,
        oven_requested=oven,
    )


def test_summarize_by_unit():
    bookings = [
        make_booking(12, date(2025, 2, 1), 10, fire=True),
        make_booking(3, date(2025, 3, 1), 2, oven=True),
        make_booking(12, date(2025, 1, 15), None),
        make_booking(12, date(2025, 7, 1), 20),
        make_booking(3, date(2025, 3, 8), 9, status=BookingStatus.PENDING),
    ]

    summaries = summarize_by_unit(bookings, POLICY)

    assert [s.unit_number for s in summaries] == [3, 12]
    unit3, unit12 = summaries
    assert (unit3.total_bookings, unit3.total_attendees, unit3.total_amount) == (1, 2, 30)
    assert unit3.bookings[0].services == ["oven"]

    assert unit12.total_bookings == 3
    # Planned attendees stand in for a missing final count
    assert unit12.total_attendees == 4 + 10 + 20
    assert unit12.total_amount == 30 + 70 + 0
    assert [line.date for line in unit12.bookings] == [date(2025, 1, 15), date(2025, 2, 1), date(2025, 7, 1)]
    assert unit12.bookings[1].services == ["fire"]
    assert unit12.bookings[1].meal_period == "evening"


@pytest.mark.parametrize(
    "created_at,expected",
    [
        # 00:30 in Madrid on 2025-01-28: four days ahead, short notice
        (datetime(2025, 1, 27, 23, 30), 30),
        # 00:30 in Madrid on 2025-01-27: five days ahead, standard tier
        (datetime(2025, 1, 26, 23, 30), 70),
    ],
)
def test_notice_counted_in_local_calendar(created_at, expected):
    policy = BillingPolicy(timezone="Europe/Madrid")
    assert compute_amount(date(2025, 2, 1), created_at, 10, policy) == expected


def test_notice_defaults_to_utc_calendar():
    assert compute_amount(date(2025, 2, 1), datetime(2025, 1, 27, 23, 30), 10, POLICY) == 70
