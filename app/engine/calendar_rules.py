"""Calendar facts derived from a booking date"""

from datetime import date, datetime, timezone
from typing import Union
from zoneinfo import ZoneInfo

from app.engine.types import EligibilityPolicy, BillingPolicy

DateLike = Union[date, datetime]


def normalize_day(value: DateLike) -> date:
    """Drop any time-of-day so comparisons happen on day boundaries"""
    if isinstance(value, datetime):
        return value.date()
    return value


def local_day(value: DateLike, tz_name: str) -> date:
    """Calendar day of a timestamp in the given zone; naive timestamps are UTC"""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(ZoneInfo(tz_name)).date()
    return value


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from start to end (negative when end is earlier)"""
    return (normalize_day(end) - normalize_day(start)).days


def notice_days(booking_date: DateLike, as_of: DateLike) -> int:
    return days_between(as_of, booking_date)


def is_short_notice(booking_date: DateLike, as_of: DateLike, policy: EligibilityPolicy) -> bool:
    return notice_days(booking_date, as_of) <= policy.short_notice_days


def is_rest_day(booking_date: DateLike, policy: EligibilityPolicy) -> bool:
    """Concierge does not work on these weekdays"""
    return normalize_day(booking_date).weekday() in policy.rest_days


def is_past(booking_date: DateLike, as_of: DateLike) -> bool:
    return normalize_day(booking_date) < normalize_day(as_of)


def is_off_season(booking_date: DateLike, policy: BillingPolicy) -> bool:
    month = normalize_day(booking_date).month
    if policy.off_season_start_month <= policy.off_season_end_month:
        return policy.off_season_start_month <= month <= policy.off_season_end_month
    # Window wrapping the new year, e.g. November..February
    return month >= policy.off_season_start_month or month <= policy.off_season_end_month
