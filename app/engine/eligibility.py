"""Service flags attached to a booking"""

from dataclasses import dataclass
from datetime import date

from app.engine.calendar_rules import DateLike, is_short_notice, is_rest_day
from app.engine.types import EligibilityPolicy


@dataclass(frozen=True)
class Eligibility:
    cleaning_service_waived: bool
    fire_preparation_allowed: bool
    short_notice: bool
    rest_day: bool


def resolve_eligibility(
    booking_date: DateLike,
    requested_fire: bool,
    as_of: date,
    policy: EligibilityPolicy,
    requested_cleaning_waiver: bool = False,
) -> Eligibility:
    """
    Derive cleaning waiver and fire-preparation permission for a booking date.

    The concierge cannot clean or light the fire on rest days or with short
    notice. A caller may ask for the cleaning waiver on any date, but can never
    clear one the rules impose. Oven claims are not affected by these rules.
    """
    short_notice = is_short_notice(booking_date, as_of, policy)
    rest_day = is_rest_day(booking_date, policy)
    concierge_unavailable = short_notice or rest_day

    return Eligibility(
        cleaning_service_waived=concierge_unavailable or bool(requested_cleaning_waiver),
        fire_preparation_allowed=bool(requested_fire) and not concierge_unavailable,
        short_notice=short_notice,
        rest_day=rest_day,
    )
