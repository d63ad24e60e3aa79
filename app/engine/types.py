"""Enumerations and policy values shared by the allocation engine"""

import enum
from dataclasses import dataclass, field
from typing import FrozenSet


class MealPeriod(str, enum.Enum):
    """Meal periods a booking can claim"""
    MIDDAY = "midday"
    EVENING = "evening"


class BlockMealPeriod(str, enum.Enum):
    """Meal periods an administrative block can cover"""
    MIDDAY = "midday"
    EVENING = "evening"
    BOTH = "both"


class BlockReason(str, enum.Enum):
    """Closed set of reasons for blocking a slot"""
    ORDINARY_GENERAL_MEETING = "ordinary_general_meeting"
    EXTRAORDINARY_GENERAL_MEETING = "extraordinary_general_meeting"


class BookingStatus(str, enum.Enum):
    """Booking lifecycle states"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class ResourcePool:
    """Bookable resources of the community dining room"""
    unit_count: int = 48
    table_count: int = 6
    attendees_per_table: int = 8

    @property
    def tables(self) -> range:
        return range(1, self.table_count + 1)

    def attendee_cap(self, table_count: int) -> int:
        return table_count * self.attendees_per_table


@dataclass(frozen=True)
class EligibilityPolicy:
    """Concierge service rules"""
    short_notice_days: int = 4
    # Weekday indexes as returned by date.weekday() (Monday == 0)
    rest_days: FrozenSet[int] = field(default_factory=lambda: frozenset({1, 2}))


@dataclass(frozen=True)
class BillingPolicy:
    """Seasonal pricing constants"""
    off_season_start_month: int = 5
    off_season_end_month: int = 11
    short_notice_days: int = 5
    short_notice_amount: int = 30
    minimum_amount: int = 30
    per_person_rate: int = 7
    # Naive creation timestamps are UTC; notice is counted in this zone
    timezone: str = "UTC"


def enum_value(value) -> str:
    """Plain string for an enum member or an already-plain value"""
    return getattr(value, "value", value)
